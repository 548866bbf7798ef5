"""Builders for schema and data documents in the wire shape."""

from __future__ import annotations

from typing import Any


def field(name: str, type_: str, mode: str = "NULLABLE", fields: list | None = None) -> dict:
    """Schema field descriptor."""
    out: dict[str, Any] = {"name": name, "type": type_, "mode": mode}
    if fields is not None:
        out["fields"] = fields
    return out


def schema_doc(*fields: dict) -> dict:
    return {"schema": {"fields": list(fields)}}


def wrap(value: Any) -> dict:
    return {"v": value}


def row(*values: Any) -> dict:
    """Data row from already-wire-shaped values."""
    return {"f": [wrap(v) for v in values]}


def record(*values: Any) -> dict:
    """Record value ``{"f": [{"v": ...}, ...]}``."""
    return {"f": [wrap(v) for v in values]}


def repeated(*values: Any) -> list:
    """Repeated value ``[{"v": ...}, ...]``."""
    return [wrap(v) for v in values]


def data_doc(*rows: dict) -> dict:
    return {"rows": list(rows)}


