"""Columnar storage for decoded result sets.

A ``Table`` is an ordered set of fixed-length columns sharing one row count.
Four column shapes cover the schema:

- ``ScalarColumn``: one nullable cell per row (``None`` is null).
- ``ListColumn``: repeated scalar; each row is its own ``ScalarColumn``.
- ``RecordColumn``: each row is a nested one-row ``Table``.
- ``RepeatedRecordColumn``: each row is a nested ``Table`` of any length,
  stored struct-of-arrays.

Row counts are fixed at allocation. Decoding replaces or fills rows in place
and never resizes a column.
"""

from __future__ import annotations

import abc
import math
from collections.abc import Sequence
from typing import Any

import pyarrow as pa

from bqcolumns.schema import Field
from bqcolumns.types import SCALAR_ARROW_TYPES, FieldType

_MICROS = 1_000_000


class Column(abc.ABC):
    """Fixed-length column bound to the field it was allocated for."""

    field: Field

    @abc.abstractmethod
    def __len__(self) -> int: ...

    @abc.abstractmethod
    def __getitem__(self, i: int) -> Any: ...

    @abc.abstractmethod
    def to_pylist(self) -> list:
        """Plain Python values, one per row."""
        ...

    @abc.abstractmethod
    def to_arrow(self) -> pa.Array:
        """Convert to a PyArrow array of ``field.arrow_type()``."""
        ...

    @property
    def name(self) -> str:
        return self.field.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, type={self.field.type.value}, length={len(self)})"


class ScalarColumn(Column):
    def __init__(self, field: Field, cells: list[Any]) -> None:
        self.field = field
        self.cells = cells

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, i: int) -> Any:
        return self.cells[i]

    @property
    def null_count(self) -> int:
        return sum(1 for cell in self.cells if cell is None)

    def to_pylist(self) -> list:
        return list(self.cells)

    def to_arrow(self) -> pa.Array:
        field_type = self.field.type
        return pa.array(
            [_arrow_cell(field_type, cell) for cell in self.cells],
            type=SCALAR_ARROW_TYPES[field_type],
        )


class ListColumn(Column):
    def __init__(self, field: Field, rows: list[ScalarColumn]) -> None:
        self.field = field
        self.rows = rows

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, i: int) -> ScalarColumn:
        return self.rows[i]

    def to_pylist(self) -> list:
        return [row.to_pylist() for row in self.rows]

    def to_arrow(self) -> pa.Array:
        field_type = self.field.type
        return pa.array(
            [[_arrow_cell(field_type, cell) for cell in row.cells] for row in self.rows],
            type=self.field.arrow_type(),
        )


class RecordColumn(Column):
    def __init__(self, field: Field, rows: list[Table]) -> None:
        self.field = field
        self.rows = rows

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, i: int) -> Table:
        return self.rows[i]

    def to_pylist(self) -> list:
        return [row.to_pylist()[0] for row in self.rows]

    def to_arrow(self) -> pa.Array:
        return _struct_array(self.field, self.rows)


class RepeatedRecordColumn(Column):
    def __init__(self, field: Field, rows: list[Table]) -> None:
        self.field = field
        self.rows = rows

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, i: int) -> Table:
        return self.rows[i]

    def to_pylist(self) -> list:
        return [row.to_pylist() for row in self.rows]

    def to_arrow(self) -> pa.Array:
        offsets = [0]
        for row in self.rows:
            offsets.append(offsets[-1] + row.num_rows)
        values = _struct_array(self.field, self.rows)
        return pa.ListArray.from_arrays(pa.array(offsets, type=pa.int32()), values)


class Table:
    """Ordered columns of equal length, named after their fields."""

    def __init__(self, fields: Sequence[Field], columns: list[Column], num_rows: int) -> None:
        self.fields = tuple(fields)
        self.columns = columns
        self.num_rows = num_rows
        self._index = {f.name: j for j, f in enumerate(self.fields)}

    def __len__(self) -> int:
        return self.num_rows

    def __getitem__(self, key: str | int) -> Column:
        if isinstance(key, int):
            return self.columns[key]
        return self.column(key)

    def __repr__(self) -> str:
        return f"Table(num_rows={self.num_rows}, columns={self.column_names})"

    @property
    def column_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def column(self, name: str) -> Column:
        try:
            return self.columns[self._index[name]]
        except KeyError:
            raise KeyError(
                f"Table has no column '{name}'. Available columns: {self.column_names}"
            ) from None

    def to_pydict(self) -> dict[str, list]:
        """Column name to plain Python values (struct-of-arrays)."""
        return {c.name: c.to_pylist() for c in self.columns}

    def to_pylist(self) -> list[dict[str, Any]]:
        """One dict per row."""
        data = [c.to_pylist() for c in self.columns]
        names = self.column_names
        return [
            {name: values[i] for name, values in zip(names, data)}
            for i in range(self.num_rows)
        ]

    def arrow_schema(self) -> pa.Schema:
        return pa.schema([f.arrow_field() for f in self.fields])

    def to_arrow(self) -> pa.Table:
        """Convert to a PyArrow table with one column per field."""
        return pa.Table.from_arrays(
            [c.to_arrow() for c in self.columns],
            schema=self.arrow_schema(),
        )


def allocate_column(field: Field, n: int, repeated: bool | None = None) -> Column:
    """Allocate an ``n``-row column for ``field``.

    ``repeated`` overrides the declared mode; a repeated child decoded inside
    a record is allocated as a single-valued column of the list's length.
    """
    repeated = field.repeated if repeated is None else repeated

    if repeated and field.is_record:
        return RepeatedRecordColumn(field, [allocate_table(field.children, 0) for _ in range(n)])
    if repeated:
        return ListColumn(field, [ScalarColumn(field, []) for _ in range(n)])
    if field.is_record:
        return RecordColumn(field, [allocate_table(field.children, 1) for _ in range(n)])
    return ScalarColumn(field, [None] * n)


def allocate_table(fields: Sequence[Field], n: int) -> Table:
    """Allocate an ``n``-row table with one column per field, every cell null."""
    return Table(fields, [allocate_column(f, n) for f in fields], n)


def _arrow_cell(field_type: FieldType, cell: Any) -> Any:
    """Scale seconds to the microsecond storage of Arrow temporal types."""
    if cell is None:
        return None
    if field_type in (FieldType.TIMESTAMP, FieldType.DATETIME, FieldType.TIME):
        if not math.isfinite(cell):
            return None
        return round(cell * _MICROS)
    return cell


def _struct_array(field: Field, tables: Sequence[Table]) -> pa.Array:
    """Concatenate nested tables into one struct array, row after row."""
    struct_type = field.arrow_type(repeated=False)
    num_rows = sum(t.num_rows for t in tables)

    if not field.children:
        return pa.array([{}] * num_rows, type=struct_type)

    children = []
    for j, child in enumerate(field.children):
        chunks = [t.columns[j].to_arrow() for t in tables]
        if chunks:
            children.append(pa.concat_arrays(chunks))
        else:
            children.append(pa.array([], type=child.arrow_type()))
    return pa.StructArray.from_arrays(children, fields=list(struct_type))
