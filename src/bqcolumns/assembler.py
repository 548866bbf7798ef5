"""Table allocation and page-by-page filling.

The assembler allocates one table for the full result set up front, then
decodes each data document (page) into it at a caller-chosen row offset::

    assembler = TableAssembler(schema)
    table = assembler.allocate(total_rows)
    offset = 0
    for document in pages:
        offset += assembler.write(document, table, offset)

The assembler keeps no cursor of its own; the offset is threaded by the
caller. Columns are never reallocated, so pages can be streamed without
holding more than one document in memory.
"""

from __future__ import annotations

import logging
from typing import Any

import bqcolumns.errors as errors
import bqcolumns.records as records
from bqcolumns.columns import Table, allocate_table
from bqcolumns.schema import Schema

logger = logging.getLogger(__name__)

ROWS_KEY = "rows"


class TableAssembler:
    """Allocates and fills tables for one schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def allocate(self, total_rows: int) -> Table:
        """Allocate a table of ``total_rows`` null rows."""
        if total_rows < 0:
            raise ValueError(f"total_rows must be >= 0, got {total_rows}")
        logger.debug(
            "Allocating %d row(s) x %d column(s)", total_rows, len(self.schema.fields)
        )
        return allocate_table(self.schema.fields, total_rows)

    def write(self, document: Any, table: Table, row_offset: int) -> int:
        """Decode the rows of ``document`` into ``table`` starting at ``row_offset``.

        Args:
            document: Parsed data document, ``{"rows": [{"f": [{"v": ...}]}]}``.
            table: Table previously returned by :meth:`allocate`.
            row_offset: Absolute row index of the document's first row.

        Returns:
            Number of rows in the document (0 when it has no ``rows``).

        Raises:
            StructuralError: If a row or value lacks a required array/object.
            TableCapacityError: If the rows do not fit at ``row_offset``.
        """
        if not isinstance(document, dict) or ROWS_KEY not in document:
            return 0

        rows = document[ROWS_KEY]
        if not isinstance(rows, list):
            raise errors.StructuralError("document", "a 'rows' array", rows)

        n = len(rows)
        if row_offset < 0 or row_offset + n > table.num_rows:
            raise errors.TableCapacityError(offset=row_offset, rows=n, capacity=table.num_rows)

        fields = self.schema.fields
        for i, row in enumerate(rows):
            location = f"row {row_offset + i}"
            values = row.get("f") if isinstance(row, dict) else None
            if not isinstance(values, list):
                raise errors.StructuralError(location, "an object with an 'f' array", row)
            if len(values) < len(fields):
                raise errors.StructuralError(
                    location, f"{len(fields)} values", found=f"{len(values)}"
                )

            for j, column in enumerate(table.columns):
                node = records.wrapped_value(values, f"{location}, field '{column.name}'", j)
                records.set_cell(column, row_offset + i, node)

        logger.debug("Wrote %d row(s) at offset %d", n, row_offset)
        return n
