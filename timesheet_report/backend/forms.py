"""Record shapes for shift rows and per-worker timesheets.

The on-disk JSON uses the keys `date`, `start`, `end`, `breakMin`, `nextDay`
and `notes` for each row. `from_dict` coerces such a raw mapping into a
`ShiftRow` without rejecting anything; the engine decides later which rows
contribute hours.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from typing_extensions import NotRequired, TypedDict

from .parsers import parse_bool_flag, parse_number


class RawShiftRow(TypedDict):
    """A shift row as stored in a `pontaj_*.json` file."""

    date: str
    start: str
    end: str
    breakMin: NotRequired[float]
    nextDay: NotRequired[bool]
    notes: NotRequired[str]


@dataclass
class ShiftRow:
    """One worked shift. `end` falls on the next day when `crosses_midnight`."""

    date: str
    start: str | None = None
    end: str | None = None
    crosses_midnight: bool = False
    break_minutes: float = 0
    notes: str | None = None


@dataclass
class WorkerTimesheet:
    """One worker's raw record. `worker` is None when the file declares no name."""

    worker: str | None
    rows: list[ShiftRow] = field(default_factory=list)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def from_dict(data: dict[str, Any]) -> ShiftRow:
    """Convert a stored row mapping to a `ShiftRow` with basic coercion."""
    return ShiftRow(
        date=_text(data.get("date")) or "",
        start=_text(data.get("start")),
        end=_text(data.get("end")),
        crosses_midnight=parse_bool_flag(data.get("nextDay")),
        break_minutes=parse_number(data.get("breakMin")),
        notes=(str(data["notes"]) if data.get("notes") is not None else None),
    )


def timesheet_from_dict(data: dict[str, Any]) -> WorkerTimesheet:
    """Convert a `{"meta": {...}, "rows": [...]}` document to a `WorkerTimesheet`."""
    meta = data.get("meta") or {}
    worker = _text(meta.get("worker")) if isinstance(meta, dict) else None
    rows = [from_dict(r) for r in (data.get("rows") or []) if isinstance(r, dict)]
    return WorkerTimesheet(worker=worker, rows=rows)


def validate(row: ShiftRow) -> list[str]:
    """Return a list of human-readable issues that keep a row out of the store."""
    issues: list[str] = []
    if not row.date.strip():
        issues.append("Date is required.")
    if not row.start:
        issues.append("Start time is required.")
    if not row.end:
        issues.append("End time is required.")
    return issues
