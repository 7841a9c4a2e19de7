from __future__ import annotations

from datetime import date

from timesheet_system.core.constants import EXPORT_EMPTY_STATE
from timesheet_system.exports.model import ROW_HEADERS, ReportRow, TimesheetReport
from timesheet_system.exports.pdf_exporter import render_pdf, table_data


def _report(rows=()):
    return TimesheetReport(
        title="Timesheet Report",
        period_start=date(2026, 3, 2),
        period_end=date(2026, 3, 15),
        rows=tuple(rows),
        summaries=(),
    )


def test_empty_report_has_explicit_empty_state_row():
    data = table_data(_report())

    assert data[0] == list(ROW_HEADERS)
    assert data[1][0] == EXPORT_EMPTY_STATE
    assert len(data) == 2


def test_rows_reuse_the_shared_cells():
    row = ReportRow("Alice", "2026-03-02", "HQ", "9:00 AM", "5:00 PM", "7h 30m", "0h 30m", 1)

    assert table_data(_report([row]))[1] == row.cells()


def test_render_pdf_produces_a_document():
    content = render_pdf(_report())

    assert content.startswith(b"%PDF")
