"""Scalar cell decoding.

Every scalar arrives as a string (the wire format quotes numbers too) or as
something else: ``None`` for SQL NULL, or an object/array where a nested value
sits. Only strings carry scalar content; everything else decodes to ``None``.

Content that fails to parse is also ``None``. Nothing in this module raises
for malformed scalar text.

Date and time text is scanned with fixed-format prefix patterns and converted
with civil-calendar arithmetic, so the wall clock is always read as UTC and
trailing characters after the recognised prefix are ignored.
"""

from __future__ import annotations

import re
from typing import Any, assert_never

from bqcolumns.types import FieldType

SECONDS_PER_DAY = 86400

_INTEGER_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_TIME_RE = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})")
_DATE_RE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
_DATETIME_RE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})T(\d{1,2}):(\d{1,2}):(\d{1,2})")
_FRACTION_RE = re.compile(r"\.(?:\d+(?:[eE][+-]?\d+)?)?")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def decode_scalar(field_type: FieldType, node: Any) -> Any:
    """Decode one wire node into a cell of ``field_type``.

    Returns ``None`` when the node is not text or the text does not parse.
    RECORD cells are decoded by :mod:`bqcolumns.records`, not here.
    """
    if not isinstance(node, str):
        if field_type is FieldType.RECORD:
            raise TypeError("RECORD cells are decoded by bqcolumns.records")
        return None

    match field_type:
        case FieldType.INTEGER:
            return parse_integer(node)
        case FieldType.FLOAT | FieldType.TIMESTAMP:
            return parse_float(node)
        case FieldType.BOOLEAN:
            return parse_boolean(node)
        case FieldType.STRING:
            return node
        case FieldType.TIME:
            return parse_time(node)
        case FieldType.DATE:
            return parse_date(node)
        case FieldType.DATETIME:
            return parse_datetime(node)
        case FieldType.RECORD:
            raise TypeError("RECORD cells are decoded by bqcolumns.records")
        case _:
            assert_never(field_type)


def parse_integer(text: str) -> int | None:
    """Signed 64-bit integer prefix; out-of-range values are null."""
    match = _INTEGER_RE.match(text)
    if match is None:
        return None
    value = int(match.group(1))
    return value if INT64_MIN <= value <= INT64_MAX else None


def parse_float(text: str) -> float | None:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else None


def parse_boolean(text: str) -> bool:
    """True iff the text starts with ``T`` or ``t``.

    Only the first character is looked at: ``"true"`` and ``"TRUE"`` are
    true, ``"false"``, ``"1"`` and ``""`` are false.
    """
    return text[:1] in ("T", "t")


def parse_time(text: str) -> float | None:
    """Seconds since midnight for ``HH:MM:SS[.ffffff]``."""
    match = _TIME_RE.match(text)
    if match is None:
        return None
    hour, minute, second = (int(g) for g in match.groups())
    if not _valid_clock(hour, minute, second):
        return None
    return hour * 3600 + minute * 60 + second + parse_partial_seconds(text, match.end())


def parse_date(text: str) -> int | None:
    """Days since 1970-01-01 for ``YYYY-MM-DD``."""
    match = _DATE_RE.match(text)
    if match is None:
        return None
    year, month, day = (int(g) for g in match.groups())
    if not _valid_date(month, day):
        return None
    return days_from_civil(year, month, day)


def parse_datetime(text: str) -> float | None:
    """UTC epoch seconds for ``YYYY-MM-DDTHH:MM:SS[.ffffff]``.

    Offsets and zone suffixes are not interpreted.
    """
    match = _DATETIME_RE.match(text)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    if not (_valid_date(month, day) and _valid_clock(hour, minute, second)):
        return None
    seconds = days_from_civil(year, month, day) * SECONDS_PER_DAY
    seconds += hour * 3600 + minute * 60 + second
    return seconds + parse_partial_seconds(text, match.end())


def parse_partial_seconds(text: str, pos: int) -> float:
    """Fraction of a second starting at ``pos``, or 0 when no ``.`` is there.

    Reads ``.`` + digits and an optional exponent, so ``.5e1`` adds 5 seconds.
    """
    match = _FRACTION_RE.match(text, pos)
    if match is None or match.group() == ".":
        return 0.0
    return float(match.group())


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 in the proleptic Gregorian calendar.

    Days past the end of a month roll into the next one (Feb 31 -> Mar 2/3).
    """
    year -= month <= 2
    era = year // 400
    yoe = year - era * 400
    doy = (153 * ((month + 9) % 12) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def _valid_date(month: int, day: int) -> bool:
    return 1 <= month <= 12 and 1 <= day <= 31


def _valid_clock(hour: int, minute: int, second: int) -> bool:
    # 60 admits a leap second
    return hour <= 23 and minute <= 59 and second <= 60
