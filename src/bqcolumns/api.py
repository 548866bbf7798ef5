"""Entry points for decoding one or many data documents."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

import bqcolumns.records as records
import bqcolumns.schema as schema_mod
from bqcolumns.assembler import ROWS_KEY, TableAssembler
from bqcolumns.columns import Column, Table, allocate_column

logger = logging.getLogger(__name__)

DocumentCallback = Callable[[int], None]


def decode_one(schema_document: Any, data_document: Any) -> Table:
    """Decode a single data document into a table sized by its own rows.

    Example:
        table = decode_one(
            {"schema": {"fields": [{"name": "x", "type": "INTEGER", "mode": "NULLABLE"}]}},
            {"rows": [{"f": [{"v": "42"}]}]},
        )
        table["x"][0]  # 42
    """
    schema = schema_mod.parse_schema(schema_document)
    assembler = TableAssembler(schema)

    rows = data_document.get(ROWS_KEY) if isinstance(data_document, dict) else None
    table = assembler.allocate(len(rows) if isinstance(rows, list) else 0)
    assembler.write(data_document, table, 0)
    return table


def decode_many(
    schema_document: Any,
    documents: Iterable[Any],
    total_rows: int,
    on_document_done: DocumentCallback | None = None,
) -> Table:
    """Decode an ordered sequence of data documents into one table.

    The table is allocated once for ``total_rows``; each document is written
    right after the previous one. Documents are consumed lazily, so passing a
    generator keeps only one document in memory.

    Args:
        schema_document: Table metadata, ``{"schema": {"fields": [...]}}``.
        documents: Parsed data documents in row order.
        total_rows: Rows across all documents, known in advance.
        on_document_done: Called with the row count of each finished document.

    Returns:
        The filled table. Rows beyond those written stay null.

    Raises:
        SchemaError: Before allocation, if the schema is invalid.
        StructuralError: If any document is malformed; no table is returned.
        SourceError: If ``documents`` fails to produce a document.
    """
    schema = schema_mod.parse_schema(schema_document)
    assembler = TableAssembler(schema)
    table = assembler.allocate(total_rows)

    offset = 0
    for count, document in enumerate(documents, start=1):
        written = assembler.write(document, table, offset)
        offset += written
        logger.debug("Document %d: %d row(s), %d total", count, written, offset)
        if on_document_done is not None:
            on_document_done(written)

    if offset != total_rows:
        logger.warning(
            "Decoded %d row(s) into a table allocated for %d; remaining rows are null",
            offset,
            total_rows,
        )
    return table


def decode_field(field_document: Any, value: Any = None) -> Column:
    """Allocate a one-row column for a single field descriptor.

    When ``value`` is given it is decoded into the row as the field's wire
    value (the content of a ``{"v": ...}`` wrapper).
    """
    field = schema_mod.parse_field(field_document)
    column = allocate_column(field, 1)
    if value is not None:
        records.set_cell(column, 0, value)
    return column
