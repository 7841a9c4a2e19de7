"""CSV export for timesheet reports."""

from __future__ import annotations

import csv
import io

from .model import ROW_HEADERS, TimesheetReport


def render_csv(report: TimesheetReport) -> str:
    """Render per-day rows, then a ``Summary`` block per employee.

    Quoting is minimal: only fields containing a delimiter, quote or newline
    are wrapped in double quotes, with inner quotes doubled.
    """

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(ROW_HEADERS)
    for row in report.rows:
        writer.writerow(row.cells())

    for summary in report.summaries:
        writer.writerow([])
        writer.writerow(["Summary"])
        for label, value in summary.lines():
            writer.writerow([label, value])

    return buf.getvalue()
