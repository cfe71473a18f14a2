"""Tabular report rows and their CSV rendering.

The same rows feed the spreadsheet export, so the layout lives here once.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence

from ..hours import HourTotals
from ..report import Report
from ..utils import collation_key

HEADER = ["Worker", "Scope", "Label", "Total Hours", "Regular Hours", "Overtime Hours", "Weighted Hours"]
RANKING_HEADER = ["Poz", "Worker", "Total Hours", "Regular Hours", "Overtime Hours", "Weighted Hours"]


def _figures(stats: HourTotals) -> list[object]:
    return [
        f"{stats.total_hours:.2f}",
        f"{stats.regular_hours:.2f}",
        f"{stats.overtime_hours:.2f}",
        f"{stats.weighted_hours:.2f}",
    ]


def build_report_rows(report: Report) -> list[list[object]]:
    """Flatten a report into rows: per-worker total/week/day lines, then the ranking."""
    rows: list[list[object]] = [list(HEADER)]
    for name in sorted(report.workers, key=collation_key):
        worker = report.workers[name]
        rows.append([worker.name, "Total", "Perioadă selectată", *_figures(worker.totals)])
        for week in sorted(worker.weekly.values(), key=lambda w: w.key):
            label = f"{week.key} ({week.start} - {week.end})"
            rows.append([worker.name, "Săptămână", label, *_figures(week)])
        for day in sorted(worker.daily.values(), key=lambda d: d.date):
            rows.append([worker.name, "Zi", day.date, *_figures(day)])

    ranking = report.comparisons.ranking
    if ranking:
        rows.append([])
        rows.append(["Comparative Ranking"])
        rows.append(list(RANKING_HEADER))
        for pos, entry in enumerate(ranking, start=1):
            rows.append([pos, entry.worker, *_figures(entry)])
        rows.append(["", "Total general", *_figures(report.comparisons.totals)])
    return rows


def render_csv(rows: Iterable[Sequence[object]]) -> str:
    """Render rows to a CSV string; fields with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    for row in rows:
        writer.writerow(["" if v is None else v for v in row])
    return buf.getvalue()
