"""Field descriptors built from a schema document.

A schema document looks like::

    {"schema": {"fields": [
        {"name": "id", "type": "INTEGER", "mode": "NULLABLE"},
        {"name": "tags", "type": "STRING", "mode": "REPEATED"},
        {"name": "address", "type": "RECORD", "mode": "NULLABLE",
         "fields": [{"name": "city", "type": "STRING", "mode": "NULLABLE"}]},
    ]}}

The resulting ``Schema`` is an immutable tree of frozen models, built once and
shared read-only by allocation and decoding.
"""

from __future__ import annotations

from typing import Any

import pyarrow as pa
import pydantic as pdt

import bqcolumns.errors as errors
from bqcolumns.types import SCALAR_ARROW_TYPES, FieldType

REPEATED_MODE = "REPEATED"


class Field(pdt.BaseModel, frozen=True, extra="forbid"):
    """One column descriptor. ``children`` is only meaningful for RECORD."""

    name: str
    type: FieldType
    repeated: bool = False
    children: tuple[Field, ...] = ()

    @property
    def is_record(self) -> bool:
        return self.type.is_record

    def child(self, name: str) -> Field:
        """Look up a direct child field by name."""
        for field in self.children:
            if field.name == name:
                return field
        raise KeyError(f"Field '{self.name}' has no child '{name}'")

    def arrow_type(self, repeated: bool | None = None) -> pa.DataType:
        """Arrow type of this field; ``repeated`` overrides the declared mode."""
        repeated = self.repeated if repeated is None else repeated
        if self.is_record:
            base: pa.DataType = pa.struct([c.arrow_field() for c in self.children])
        else:
            base = SCALAR_ARROW_TYPES[self.type]
        return pa.list_(base) if repeated else base

    def arrow_field(self) -> pa.Field:
        return pa.field(self.name, self.arrow_type())


class Schema(pdt.BaseModel, frozen=True, extra="forbid"):
    """Ordered top-level fields of a result set."""

    fields: tuple[Field, ...]

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def arrow_schema(self) -> pa.Schema:
        return pa.schema([f.arrow_field() for f in self.fields])


def parse_field_type(type_name: str, field_name: str = "<unnamed>") -> FieldType:
    """Map a wire type name onto ``FieldType``."""
    try:
        return FieldType(type_name)
    except ValueError:
        raise errors.UnknownFieldTypeError(
            field_name=field_name,
            type_name=str(type_name),
            supported=[t.value for t in FieldType],
        ) from None


def parse_field(node: Any) -> Field:
    """Build a ``Field`` (and its children) from one schema entry.

    ``mode`` other than ``"REPEATED"`` (including a missing mode) means a
    single value. ``fields`` is recursed into whenever present, whatever the
    declared type.

    Raises:
        SchemaError: If the entry is not an object, lacks ``name``/``type``,
            or names an unknown type.
    """
    if not isinstance(node, dict):
        raise errors.SchemaError(
            context="Parsing schema field",
            cause=f"Field descriptor must be an object, got {type(node).__name__}",
            fix="Each entry of 'fields' must be an object with 'name' and 'type'",
        )

    name = node.get("name")
    if not isinstance(name, str):
        raise errors.SchemaError(
            context="Parsing schema field",
            cause="Field descriptor has no 'name'",
            fix="Add a string 'name' to every field descriptor",
        )

    type_name = node.get("type")
    if not isinstance(type_name, str):
        raise errors.SchemaError(
            context=f"Parsing schema field '{name}'",
            cause="Field descriptor has no 'type'",
            fix="Add a 'type' such as INTEGER, STRING or RECORD",
        )

    children: tuple[Field, ...] = ()
    if "fields" in node:
        sub = node["fields"]
        if not isinstance(sub, list):
            raise errors.SchemaError(
                context=f"Parsing schema field '{name}'",
                cause="'fields' must be an array",
                fix="List nested field descriptors under 'fields'",
            )
        children = tuple(parse_field(child) for child in sub)

    return Field(
        name=name,
        type=parse_field_type(type_name, name),
        repeated=node.get("mode") == REPEATED_MODE,
        children=children,
    )


def parse_schema(document: Any) -> Schema:
    """Build a ``Schema`` from a full schema document (``{"schema": {"fields": [...]}}``)."""
    fields = None
    if isinstance(document, dict) and isinstance(document.get("schema"), dict):
        fields = document["schema"].get("fields")

    if not isinstance(fields, list):
        raise errors.SchemaError(
            context="Parsing schema document",
            cause="Document has no 'schema.fields' array",
            fix='Pass the table metadata, shaped like {"schema": {"fields": [...]}}',
        )

    return Schema(fields=tuple(parse_field(node) for node in fields))
