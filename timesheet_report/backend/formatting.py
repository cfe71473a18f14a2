"""Plain-text rendering of an aggregated report.

Two numeric styles are supported: decimal hours ("7.50 h") and hours plus
minutes ("7 h 30 m"). Labels are in Romanian, matching the stored timesheets.
"""

from __future__ import annotations

import math
from datetime import date

from .hours import HourTotals
from .parsers import parse_date_input
from .report import DayStats, Report, WeekStats
from .utils import collation_key

NO_ACTIVITY_MESSAGE = "No activity found for selected period."
DEFAULT_DATE_FORMAT = "%d/%m/%Y"


def format_hm(hours: float) -> str:
    # Round once on total minutes so 7.999h prints "8 h 00 m", not "7 h 60 m".
    total_minutes = math.floor(hours * 60 + 0.5)
    h, m = divmod(total_minutes, 60)
    return f"{h} h {m:02d} m"


def format_hours_value(hours: float, mode: str = "decimal") -> str:
    if mode == "hours-minutes":
        return format_hm(hours)
    return f"{hours:.2f} h"


def format_date(value: str | date | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render a date in the chosen variant; text that is not a date is returned as-is."""
    if value is None:
        return ""
    parsed = parse_date_input(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(date_format)


def _breakdown(stats: HourTotals, mode: str, *, weighted: bool) -> str:
    parts = [
        f"Reg: {format_hours_value(stats.regular_hours, mode)}",
        f"Supl: {format_hours_value(stats.overtime_hours, mode)}",
    ]
    if weighted:
        parts.append(f"Ajustat: {format_hours_value(stats.weighted_hours, mode)}")
    return f"{format_hours_value(stats.total_hours, mode)} ({', '.join(parts)})"


def _shift_count(entries: int) -> str:
    return f"[{entries} schimb{'' if entries == 1 else 'uri'}]"


def _week_sort_key(week: WeekStats) -> date:
    return week.start or date.min


def _day_sort_key(day: DayStats) -> tuple[date, str]:
    return (parse_date_input(day.date) or date.min, day.date)


def format_report(
    report: Report,
    mode: str = "decimal",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Render the report as text, or "" when no worker has activity in range.

    Args:
        report: Output of `aggregate`.
        mode: "decimal" or "hours-minutes".
        date_format: strftime pattern for day and week dates.
    """
    if not report.workers:
        return ""

    lines: list[str] = []
    for name in sorted(report.workers, key=collation_key):
        worker = report.workers[name]
        lines.append(worker.name)
        lines.append(f"  Total perioadă: {_breakdown(worker.totals, mode, weighted=True)}")

        weeks = sorted(worker.weekly.values(), key=_week_sort_key)
        if weeks:
            lines.append("  Săptămâni:")
            for week in weeks:
                span = f"{format_date(week.start, date_format)} - {format_date(week.end, date_format)}"
                lines.append(f"    {week.key} ({span}): {_breakdown(week, mode, weighted=False)}")

        days = sorted(worker.daily.values(), key=_day_sort_key)
        if days:
            lines.append("  Zile:")
            for day in days:
                lines.append(
                    f"    {format_date(day.date, date_format)}: "
                    f"{_breakdown(day, mode, weighted=False)} {_shift_count(day.entries)}"
                )

        lines.append("")

    ranking = report.comparisons.ranking
    if ranking:
        lines.append("Sumar comparativ:")
        for pos, entry in enumerate(ranking, start=1):
            lines.append(f"  {pos}. {entry.worker} – {_breakdown(entry, mode, weighted=True)}")
        lines.append(
            f"  Total general: {_breakdown(report.comparisons.totals, mode, weighted=True)}"
        )

    return "\n".join(lines).strip()
