"""Structured error handling with context + cause + fix pattern.

Every bqcolumns error carries:
- Context: What operation was being attempted
- Cause: Why it failed
- Fix: How to resolve the issue

Malformed *shape* (schema or document structure) raises. Malformed *scalar
content* never raises; it decodes to null.
"""

from __future__ import annotations


class BqColumnsError(Exception):
    """Base error with structured messaging."""

    def __init__(self, context: str, cause: str, fix: str) -> None:
        self.context = context
        self.cause = cause
        self.fix = fix
        message = f"{context}\n\nCause: {cause}\n\nFix: {fix}"
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize error to structured dict for JSON output."""
        return {
            "error": True,
            "code": type(self).__name__,
            "context": self.context,
            "cause": self.cause,
            "fix": self.fix,
        }


class SchemaError(BqColumnsError):
    """Schema document could not be turned into field descriptors."""

    pass


class UnknownFieldTypeError(SchemaError):
    """Field declares a type outside the supported set."""

    def __init__(self, field_name: str, type_name: str, supported: list[str]) -> None:
        super().__init__(
            context=f"Parsing schema field '{field_name}'",
            cause=f"Unknown type '{type_name}'",
            fix=f"Use one of the supported types: {', '.join(supported)}",
        )
        self.field_name = field_name
        self.type_name = type_name


class StructuralError(BqColumnsError):
    """Data document lacks an array or object where decoding requires one."""

    def __init__(
        self, location: str, expected: str, got: object = None, found: str | None = None
    ) -> None:
        super().__init__(
            context=f"Decoding {location}",
            cause=f"Expected {expected}, got {found or _describe(got)}",
            fix="Check that the data document matches the schema it is decoded with",
        )
        self.location = location
        self.expected = expected


class TableCapacityError(StructuralError):
    """A write would fall outside the rows allocated for the table."""

    def __init__(self, offset: int, rows: int, capacity: int) -> None:
        BqColumnsError.__init__(
            self,
            context=f"Writing {rows} row(s) at offset {offset}",
            cause=f"Table was allocated with {capacity} row(s)",
            fix="Allocate the table with the total row count across all documents",
        )
        self.location = "table"
        self.expected = f"rows within [0, {capacity})"


class SourceError(BqColumnsError):
    """A source document could not be read or parsed."""

    def __init__(self, source: str, details: str) -> None:
        super().__init__(
            context=f"Loading document '{source}'",
            cause=details,
            fix="Check the file exists and contains a complete JSON document",
        )
        self.source = source


class ConfigurationError(BqColumnsError):
    """Configuration file or settings related errors."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, path: str) -> None:
        super().__init__(
            context=f"Loading configuration from '{path}'",
            cause="Configuration file not found",
            fix=f"Create a YAML settings file at '{path}' or omit --config",
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(
            context=f"Validating configuration from '{path}'",
            cause=details,
            fix="Check the configuration keys: quiet, log_level, compression, preview_rows",
        )


def _describe(node: object) -> str:
    if node is None:
        return "null"
    if isinstance(node, dict):
        return "object"
    if isinstance(node, list):
        return "array"
    if isinstance(node, str):
        return "string"
    return type(node).__name__
