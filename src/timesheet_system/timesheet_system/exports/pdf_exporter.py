from __future__ import annotations

from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..core.constants import EXPORT_EMPTY_STATE
from .formatting import format_period
from .model import ROW_HEADERS, TimesheetReport

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
HEADER_FILL = colors.HexColor("#1F2937")
ZEBRA_FILL = colors.HexColor("#F3F4F6")


def table_data(report: TimesheetReport) -> list[list[str]]:
    """Header plus one line per day; an explicit empty-state line when there are none."""

    data = [list(ROW_HEADERS)]
    if report.is_empty:
        data.append([EXPORT_EMPTY_STATE] + [""] * (len(ROW_HEADERS) - 1))
    else:
        data.extend(row.cells() for row in report.rows)
    return data


def summary_data(report: TimesheetReport) -> list[list[list[str]]]:
    return [[[label, value] for label, value in summary.lines()] for summary in report.summaries]


def _rows_style(report: TimesheetReport, row_count: int) -> TableStyle:
    commands = [
        ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
        ("FONTNAME", (0, 1), (-1, -1), FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    if report.is_empty:
        commands += [
            ("SPAN", (0, 1), (-1, 1)),
            ("ALIGN", (0, 1), (-1, 1), "CENTER"),
            ("TEXTCOLOR", (0, 1), (-1, 1), colors.grey),
        ]
    else:
        for i in range(2, row_count, 2):
            commands.append(("BACKGROUND", (0, i), (-1, i), ZEBRA_FILL))
    return TableStyle(commands)


def _summary_style() -> TableStyle:
    return TableStyle(
        [
            ("FONTNAME", (0, 0), (0, -1), FONT_BOLD),
            ("FONTNAME", (1, 0), (1, -1), FONT),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ]
    )


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont(FONT, 8)
    width, _ = doc.pagesize
    canvas.drawRightString(width - doc.rightMargin, 8 * mm, f"Page {doc.page}")
    canvas.restoreState()


def render_pdf(report: TimesheetReport) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=14 * mm,
        title=report.title,
    )
    styles = getSampleStyleSheet()

    rows = table_data(report)
    rows_table = Table(rows, repeatRows=1)
    rows_table.setStyle(_rows_style(report, len(rows)))

    story = [
        Paragraph(report.title, styles["Title"]),
        Paragraph(format_period(report.period_start, report.period_end), styles["Normal"]),
        Spacer(1, 6 * mm),
        rows_table,
    ]

    for block in summary_data(report):
        summary_table = Table(block, colWidths=[45 * mm, 80 * mm], hAlign="LEFT")
        summary_table.setStyle(_summary_style())
        story += [Spacer(1, 6 * mm), Paragraph("Summary", styles["Heading3"]), summary_table]

    doc.build(story, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    return buf.getvalue()
