"""Core type definitions for bqcolumns.

The wire format describes every column with one of a closed set of type
names. ``FieldType`` is that set; decoders dispatch on it with exhaustive
``match`` statements so adding a kind surfaces every place that must handle it.

PyArrow is the interchange format for decoded tables. The aliases below are
the Arrow types each kind is exported as.
"""

from __future__ import annotations

import enum

import pyarrow as pa


class FieldType(enum.Enum):
    """Column kinds understood by the decoder."""

    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    TIMESTAMP = "TIMESTAMP"
    TIME = "TIME"
    DATE = "DATE"
    DATETIME = "DATETIME"
    RECORD = "RECORD"

    @property
    def is_record(self) -> bool:
        return self is FieldType.RECORD


# =============================================================================
# PyArrow Type Aliases
# =============================================================================

ArrowTable = pa.Table
ArrowSchema = pa.Schema
ArrowArray = pa.Array
ArrowDataType = pa.DataType

Int64 = pa.int64()
Float64 = pa.float64()
String = pa.string()
Bool = pa.bool_()
Timestamp = pa.timestamp("us", tz="UTC")  # microsecond precision, absolute
DateTime = pa.timestamp("us")  # civil wall clock, no zone
Date = pa.date32()
Time = pa.time64("us")

SCALAR_ARROW_TYPES: dict[FieldType, pa.DataType] = {
    FieldType.INTEGER: Int64,
    FieldType.FLOAT: Float64,
    FieldType.BOOLEAN: Bool,
    FieldType.STRING: String,
    FieldType.TIMESTAMP: Timestamp,
    FieldType.TIME: Time,
    FieldType.DATE: Date,
    FieldType.DATETIME: DateTime,
}
