"""Recursive decoding of nested and repeated values.

Wire shapes handled here:

- Repeated value: ``[{"v": <elem>}, {"v": <elem>}, ...]``
- Record: ``{"f": [{"v": <child 0>}, {"v": <child 1>}, ...]}``
- Repeated record: ``[{"v": {"f": [...]}}, {"v": {"f": [...]}}, ...]``

Records decode into one-row nested tables; repeated records decode into
struct-of-arrays nested tables sized by the wire array.

A record that is not an object (SQL NULL struct) and a top-level repeated
record that is not an array both decode leniently (all-null row / zero rows).
Inside a record, a repeated record child must be an array, and each element
that is not an object becomes an all-null row. Any other missing array or
object is a ``StructuralError``.
"""

from __future__ import annotations

from typing import Any

import bqcolumns.errors as errors
import bqcolumns.values as values
from bqcolumns.columns import (
    Column,
    ListColumn,
    RecordColumn,
    RepeatedRecordColumn,
    ScalarColumn,
    Table,
    allocate_column,
    allocate_table,
)
from bqcolumns.schema import Field


def set_cell(column: Column, i: int, node: Any) -> None:
    """Decode ``node`` into row ``i`` of ``column``, recursing into nested shapes."""
    field = column.field

    if isinstance(column, ScalarColumn):
        column.cells[i] = values.decode_scalar(field.type, node)
    elif isinstance(column, ListColumn):
        column.rows[i] = decode_repeated(field, node)
    elif isinstance(column, RecordColumn):
        fill_record(column.rows[i], field, node)
    elif isinstance(column, RepeatedRecordColumn):
        column.rows[i] = decode_repeated_record(field, node)
    else:
        raise TypeError(f"Unsupported column type: {type(column).__name__}")


def decode_repeated(field: Field, node: Any) -> ScalarColumn:
    """Decode a repeated scalar into a column sized by the wire array."""
    if not isinstance(node, list):
        raise errors.StructuralError(
            f"repeated field '{field.name}'", "an array of wrapped values", node
        )

    out = allocate_column(field, len(node), repeated=False)
    for k, element in enumerate(node):
        set_cell(out, k, wrapped_value(element, f"element {k} of '{field.name}'"))
    return out  # type: ignore[return-value]


def decode_record(field: Field, node: Any) -> Table:
    """Decode one record value into a fresh one-row table."""
    table = allocate_table(field.children, 1)
    fill_record(table, field, node)
    return table


def fill_record(table: Table, field: Field, node: Any, row: int = 0) -> None:
    """Fill ``row`` of a pre-allocated table from a record value.

    A non-object node leaves the row as allocated: every scalar child null,
    every repeated child empty.
    """
    if not isinstance(node, dict):
        return

    children = child_values(node, field)
    for j, column in enumerate(table.columns):
        child = wrapped_value(children, f"child '{column.name}' of '{field.name}'", j)
        if isinstance(column, RepeatedRecordColumn):
            column.rows[row] = decode_record_array(column.field, child)
        else:
            set_cell(column, row, child)


def decode_record_array(field: Field, node: Any) -> Table:
    """Decode the repeated record child of a record.

    The wire value must be an array. Each element follows the single-record
    rule, so a non-object element is an all-null row.
    """
    if not isinstance(node, list):
        raise errors.StructuralError(
            f"repeated field '{field.name}'", "an array of wrapped values", node
        )

    table = allocate_table(field.children, len(node))
    for i, element in enumerate(node):
        fill_record(table, field, wrapped_value(element, f"element {i} of '{field.name}'"), row=i)
    return table


def decode_repeated_record(field: Field, node: Any) -> Table:
    """Decode an array of records into a struct-of-arrays table.

    A non-array node is an empty array.
    """
    n = len(node) if isinstance(node, list) else 0
    table = allocate_table(field.children, n)

    for i in range(n):
        record = wrapped_value(node[i], f"element {i} of '{field.name}'")
        children = child_values(record, field, i)
        for j, column in enumerate(table.columns):
            set_cell(
                column,
                i,
                wrapped_value(children, f"child '{column.name}' of '{field.name}'[{i}]", j),
            )

    return table


def child_values(record: Any, field: Field, index: int | None = None) -> list:
    """Return the ``f`` array of a record object, checked against the child count."""
    location = f"record '{field.name}'" if index is None else f"record '{field.name}'[{index}]"
    children = record.get("f") if isinstance(record, dict) else None

    if not isinstance(children, list):
        raise errors.StructuralError(location, "an object with an 'f' array", record)
    if len(children) < len(field.children):
        raise errors.StructuralError(
            location,
            f"{len(field.children)} child values",
            found=f"{len(children)}",
        )
    return children


def wrapped_value(container: Any, location: str, index: int | None = None) -> Any:
    """Unwrap ``{"v": value}``, optionally from position ``index`` of an array."""
    wrapper = container if index is None else container[index]
    if not isinstance(wrapper, dict) or "v" not in wrapper:
        raise errors.StructuralError(location, "a wrapped value {\"v\": ...}", wrapper)
    return wrapper["v"]
