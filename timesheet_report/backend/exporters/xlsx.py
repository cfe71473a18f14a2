"""Spreadsheet export of a report (single sheet named "Raport")."""

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..report import Report
from .csv import build_report_rows

SHEET_TITLE = "Raport"


def build_workbook(report: Report) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    for row in build_report_rows(report):
        ws.append(row)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for idx, column in enumerate(ws.columns, start=1):
        width = max((len(str(c.value)) for c in column if c.value is not None), default=8)
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)
    return wb


def render_xlsx(report: Report) -> bytes:
    buf = io.BytesIO()
    build_workbook(report).save(buf)
    return buf.getvalue()
