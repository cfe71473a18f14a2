"""PDF export: the text report laid out in a monospaced font, one line per row."""

from __future__ import annotations

import io

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..formatting import DEFAULT_DATE_FORMAT, format_report
from ..report import Report
from ..utils import strip_accents

TITLE = "Raport pontaj"
EMPTY_TEXT = "Nicio activitate pentru perioada selectată."
FONT = "Courier"
FONT_SIZE = 11
TITLE_SIZE = 16
MARGIN = 40
LINE_GAP = 4


def _pdf_text(line: str) -> str:
    # The built-in Type 1 fonts have no glyphs for ă, ș, ț.
    return strip_accents(line)


def render_pdf(
    report: Report,
    mode: str = "hours-minutes",
    date_format: str = DEFAULT_DATE_FORMAT,
) -> bytes:
    text = format_report(report, mode, date_format) or EMPTY_TEXT
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=A4)
    pdf.setTitle(TITLE)
    _, height = A4

    y = height - MARGIN
    pdf.setFont(FONT, TITLE_SIZE)
    pdf.drawString(MARGIN, y, TITLE)
    y -= 24
    pdf.setFont(FONT, FONT_SIZE)

    for line in text.split("\n"):
        if y < MARGIN:
            pdf.showPage()
            pdf.setFont(FONT, FONT_SIZE)
            y = height - MARGIN
        pdf.drawString(MARGIN, y, _pdf_text(line))
        y -= FONT_SIZE + LINE_GAP

    pdf.save()
    return buf.getvalue()
