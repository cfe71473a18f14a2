"""Report aggregation over per-worker timesheets.

`aggregate` folds every in-range shift row into four levels at once: the day
bucket, the ISO-week bucket, the worker totals and the cross-worker totals.
Workers, days and weeks are created on first touch, so a worker with no rows in
the range never shows up in the report.

The engine performs no I/O and keeps no state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from .errors import InvalidDateRangeError, InvertedRangeError
from .forms import WorkerTimesheet
from .hours import HourTotals, OvertimePolicy, compute_daily_stats
from .parsers import parse_date_input
from .utils import collation_key
from .weeks import WeekInfo, week_info

logger = logging.getLogger(__name__)

UNKNOWN_WORKER = "necunoscut"


@dataclass
class DayStats(HourTotals):
    date: str = ""
    entries: int = 0


@dataclass
class WeekStats(HourTotals):
    key: str = ""
    week_number: int = 0
    year: int = 0
    start: date | None = None
    end: date | None = None


@dataclass
class RankingEntry(HourTotals):
    worker: str = ""


@dataclass
class WorkerReport:
    name: str
    totals: HourTotals = field(default_factory=HourTotals)
    daily: dict[str, DayStats] = field(default_factory=dict)
    weekly: dict[str, WeekStats] = field(default_factory=dict)

    def day(self, date_key: str) -> DayStats:
        """Get or create the bucket for a literal row date."""
        bucket = self.daily.get(date_key)
        if bucket is None:
            bucket = self.daily[date_key] = DayStats(date=date_key)
        return bucket

    def week(self, info: WeekInfo) -> WeekStats:
        """Get or create the bucket for an ISO week; metadata is set only on creation."""
        bucket = self.weekly.get(info.key)
        if bucket is None:
            bucket = self.weekly[info.key] = WeekStats(
                key=info.key,
                week_number=info.week_number,
                year=info.year,
                start=info.start,
                end=info.end,
            )
        return bucket


@dataclass
class Comparisons:
    totals: HourTotals = field(default_factory=HourTotals)
    ranking: list[RankingEntry] = field(default_factory=list)


@dataclass
class ReportMetadata:
    from_date: date | None
    to_date: date | None
    overtime_threshold: float
    overtime_rate: float
    generated_at: datetime


@dataclass
class Report:
    metadata: ReportMetadata
    workers: dict[str, WorkerReport] = field(default_factory=dict)
    comparisons: Comparisons = field(default_factory=Comparisons)

    def worker(self, name: str) -> WorkerReport:
        entry = self.workers.get(name)
        if entry is None:
            entry = self.workers[name] = WorkerReport(name=name)
        return entry

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view with dates as ISO strings."""
        meta = self.metadata
        return {
            "metadata": {
                "from": meta.from_date.isoformat() if meta.from_date else None,
                "to": meta.to_date.isoformat() if meta.to_date else None,
                "overtime_threshold": meta.overtime_threshold,
                "overtime_rate": meta.overtime_rate,
                "generated_at": meta.generated_at.isoformat(),
            },
            "workers": {
                name: {
                    "name": w.name,
                    "totals": w.totals.as_dict(),
                    "daily": {
                        k: {"date": d.date, "entries": d.entries, **d.as_dict()}
                        for k, d in w.daily.items()
                    },
                    "weekly": {
                        k: {
                            "key": wk.key,
                            "week_number": wk.week_number,
                            "year": wk.year,
                            "start": wk.start.isoformat() if wk.start else None,
                            "end": wk.end.isoformat() if wk.end else None,
                            **wk.as_dict(),
                        }
                        for k, wk in w.weekly.items()
                    },
                }
                for name, w in self.workers.items()
            },
            "comparisons": {
                "totals": self.comparisons.totals.as_dict(),
                "ranking": [
                    {"worker": r.worker, **r.as_dict()} for r in self.comparisons.ranking
                ],
            },
        }


def resolve_bound(value: Any, bound: str, *, strict: bool = False) -> date | None:
    """Parse a `from`/`to` bound; None means no filtering on that side.

    An unparseable bound raises `InvalidDateRangeError` when `strict`, and is
    otherwise dropped.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_date_input(value)
    if parsed is None:
        if strict:
            raise InvalidDateRangeError(bound, value)
        logger.debug("Ignoring unparseable '%s' bound: %r", bound, value)
    return parsed


def _ranking(workers: Iterable[WorkerReport]) -> list[RankingEntry]:
    ordered = sorted(workers, key=lambda w: (-w.totals.total_hours, collation_key(w.name)))
    return [RankingEntry(worker=w.name, **w.totals.as_dict()) for w in ordered]


def aggregate(
    timesheets: Iterable[WorkerTimesheet],
    from_date: Any = None,
    to_date: Any = None,
    policy: OvertimePolicy | None = None,
    *,
    strict: bool = False,
    now: datetime | None = None,
) -> Report:
    """Build daily, weekly, per-worker and cross-worker hour summaries.

    Args:
        timesheets: Raw per-worker records.
        from_date: Inclusive lower bound (date, ISO or DD/MM/YYYY text), optional.
        to_date: Inclusive upper bound, same forms, optional.
        policy: Overtime threshold and rate; defaults to 8h at 1.5x.
        strict: Raise on unparseable bounds instead of ignoring them.
        now: Timestamp recorded as `generated_at` (defaults to the current UTC time).
    """
    policy = policy or OvertimePolicy()
    start = resolve_bound(from_date, "from", strict=strict)
    end = resolve_bound(to_date, "to", strict=strict)
    if start and end and start > end:
        raise InvertedRangeError(start.isoformat(), end.isoformat())

    report = Report(
        metadata=ReportMetadata(
            from_date=start,
            to_date=end,
            overtime_threshold=policy.threshold,
            overtime_rate=policy.rate,
            generated_at=now or datetime.now(timezone.utc),
        )
    )

    skipped = 0
    for sheet in timesheets:
        name = sheet.worker or UNKNOWN_WORKER
        entry: WorkerReport | None = None
        for row in sheet.rows:
            day = parse_date_input(row.date) if row.date else None
            if day is None:
                skipped += 1
                continue
            if (start and day < start) or (end and day > end):
                continue

            if entry is None:
                entry = report.worker(name)

            stats = compute_daily_stats(row, policy.threshold, policy.rate)

            bucket = entry.day(row.date)
            bucket.add(stats)
            bucket.entries += 1

            entry.week(week_info(day)).add(stats)
            entry.totals.add(stats)
            report.comparisons.totals.add(stats)

    if skipped:
        logger.debug("Skipped %d row(s) without a usable date", skipped)

    report.comparisons.ranking = _ranking(report.workers.values())
    return report
