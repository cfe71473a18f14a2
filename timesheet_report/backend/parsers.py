"""Parsing of dates, clock times and loosely typed imported values.

Everything here is permissive: bad input yields None, "" or 0 rather than an
exception. Callers that need strictness (the CLI date bounds) check for None
themselves.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date as _date, datetime, timedelta
from typing import Any

# Spreadsheet serial day numbers count from 1899-12-31 (1970-01-01 is day 25568).
SERIAL_EPOCH_OFFSET = 25568
_UNIX_EPOCH = _date(1970, 1, 1)

_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TRUTHY_FLAGS = frozenset({"true", "1", "da", "yes"})


def parse_date_input(value: Any) -> _date | None:
    """Parse a calendar date from a date object, ISO text or DD/MM/YYYY text.

    ISO datetimes ("2025-09-01T08:00:00") are accepted and truncated to the
    date. Returns None for anything else, including impossible dates such as
    31/02/2025.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, _date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None

    dmy = _DMY.match(s)
    if dmy:
        day, month, year = (int(g) for g in dmy.groups())
        try:
            return _date(year, month, day)
        except ValueError:
            return None

    try:
        if _ISO.match(s):
            return _date.fromisoformat(s)
        return datetime.fromisoformat(s).date()
    except ValueError:
        return None


def _int_part(part: str) -> int:
    part = part.strip()
    try:
        return int(part)
    except ValueError:
        pass
    try:
        num = float(part)
    except ValueError:
        return 0
    return int(num) if math.isfinite(num) else 0


def parse_clock_time(text: str | None) -> int:
    """Return minutes since midnight for an "H:MM" string.

    No range checks: "25:99" gives 1599. A missing or empty value reads as
    "0:0". Seconds, if present, are ignored.
    """
    s = (text or "").strip() or "0:0"
    parts = s.split(":")
    hours = _int_part(parts[0])
    minutes = _int_part(parts[1]) if len(parts) > 1 else 0
    return hours * 60 + minutes


def parse_number(value: Any) -> float:
    """Coerce a break-minutes style value to a number; 0 when not numeric."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        num = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(num):
        return 0
    return int(num) if num.is_integer() else num


def parse_bool_flag(value: Any) -> bool:
    """Interpret an imported overnight flag: native booleans or true/1/da/yes text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_FLAGS
    if isinstance(value, numbers.Real):
        return bool(math.isfinite(value) and value != 0)
    return False


def serial_to_date(serial: float) -> _date:
    return _UNIX_EPOCH + timedelta(days=math.floor(serial) - SERIAL_EPOCH_OFFSET)


def normalize_date_value(value: Any) -> str:
    """Normalize an imported date cell to YYYY-MM-DD, or "" when it is not a date.

    Accepts date/datetime objects (pandas Timestamps included), spreadsheet
    serial numbers, and text in ISO or DD/MM/YYYY form.
    """
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if not math.isfinite(value):
            return ""
        try:
            return serial_to_date(value).isoformat()
        except OverflowError:
            return ""
    parsed = parse_date_input(value)
    return parsed.isoformat() if parsed else ""
