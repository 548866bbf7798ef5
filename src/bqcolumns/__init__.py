from .api import decode_field, decode_many, decode_one
from .assembler import TableAssembler
from .columns import (
    Column,
    ListColumn,
    RecordColumn,
    RepeatedRecordColumn,
    ScalarColumn,
    Table,
    allocate_column,
    allocate_table,
)
from .errors import BqColumnsError, SchemaError, SourceError, StructuralError
from .schema import Field, Schema, parse_field, parse_schema
from .sources import decode_files
from .types import FieldType

__all__ = [
    # entry points
    "decode_one",
    "decode_many",
    "decode_field",
    "decode_files",
    # schema
    "Field",
    "FieldType",
    "Schema",
    "parse_field",
    "parse_schema",
    # tables
    "Table",
    "TableAssembler",
    "Column",
    "ScalarColumn",
    "ListColumn",
    "RecordColumn",
    "RepeatedRecordColumn",
    "allocate_column",
    "allocate_table",
    # errors
    "BqColumnsError",
    "SchemaError",
    "StructuralError",
    "SourceError",
]
