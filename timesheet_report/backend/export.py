from __future__ import annotations

import logging
from pathlib import Path

from .errors import UnsupportedFormatError
from .exporters.csv import build_report_rows, render_csv
from .exporters.pdf import render_pdf
from .exporters.xlsx import render_xlsx
from .formatting import DEFAULT_DATE_FORMAT
from .report import Report

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "xlsx", "pdf")


def export_format_for(path: str | Path, fmt: str | None = None) -> str:
    """Pick the export format from `fmt`, or from the file suffix when `fmt` is None."""
    chosen = (fmt or Path(path).suffix.lstrip(".")).lower()
    if chosen not in EXPORT_FORMATS:
        raise UnsupportedFormatError(chosen)
    return chosen


def render_export(
    report: Report,
    fmt: str,
    mode: str = "hours-minutes",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> bytes:
    if fmt == "csv":
        return render_csv(build_report_rows(report)).encode("utf-8")
    if fmt == "xlsx":
        return render_xlsx(report)
    if fmt == "pdf":
        return render_pdf(report, mode, date_format)
    raise UnsupportedFormatError(fmt)


def export_report(
    report: Report,
    path: str | Path,
    fmt: str | None = None,
    mode: str = "hours-minutes",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Path:
    """Write the report to `path` as CSV, XLSX or PDF and return the path."""
    chosen = export_format_for(path, fmt)
    payload = render_export(report, chosen, mode, date_format)
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(payload)
    logger.info("Exported %s report to %s", chosen, p)
    return p
