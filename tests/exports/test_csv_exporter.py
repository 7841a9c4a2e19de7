from __future__ import annotations

import csv
import io
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from conftest import parse_duration

from timesheet_system.exports.builder import ReportSection, build_report
from timesheet_system.exports.csv_exporter import render_csv
from timesheet_system.exports.model import ROW_HEADERS
from timesheet_system.punches.model import BreakInterval, DayAggregate
from timesheet_system.timesheets.period import aggregate_period


def _day(d: int, work: int, brk: int, location_id=None) -> DayAggregate:
    start = datetime(2026, 3, d, 9, 0, tzinfo=timezone.utc)
    return DayAggregate(
        employee_id=1,
        work_date=date(2026, 3, d),
        clock_in=start,
        clock_out=start.replace(hour=17),
        break_intervals=(BreakInterval(start.replace(hour=12), start.replace(hour=12, minute=brk)),) if brk else (),
        work_minutes=work,
        break_minutes=brk,
        location_id=location_id,
    )


def _report(name: str, days, threshold: int = 2400):
    section = ReportSection(
        employee_name=name,
        days=days,
        totals=aggregate_period(days, threshold_minutes=threshold),
        status="pending",
    )
    return build_report(
        title="Timesheet",
        period_start=date(2026, 3, 2),
        period_end=date(2026, 3, 15),
        sections=[section],
        tz=ZoneInfo("UTC"),
        location_names={1: "Warehouse, North"},
    )


def test_csv_layout_rows_then_summary():
    report = _report("Alice Nguyen", [_day(3, 480, 0), _day(2, 450, 30, location_id=1)])

    lines = render_csv(report).split("\n")

    assert lines[0] == ",".join(ROW_HEADERS)
    assert lines[1] == 'Alice Nguyen,2026-03-02,"Warehouse, North",9:00 AM,5:00 PM,7h 30m,0h 30m,1'
    assert lines[2] == "Alice Nguyen,2026-03-03,N/A,9:00 AM,5:00 PM,8h,0h,0"
    assert lines[3] == ""
    assert lines[4] == "Summary"
    assert lines[5:11] == [
        "Employee,Alice Nguyen",
        'Period,"Mar 2 - Mar 15, 2026"',
        "Total Hours,15h 30m",
        "Break Hours,0h 30m",
        "Overtime Hours,0h",
        "Status,pending",
    ]


def test_quotes_and_newlines_are_escaped():
    report = _report('Jo "JJ" Smith\nJr', [_day(2, 60, 0)])

    rows = list(csv.reader(io.StringIO(render_csv(report))))

    assert rows[1][0] == 'Jo "JJ" Smith\nJr'
    assert '"Jo ""JJ"" Smith' in render_csv(report)


def test_day_durations_sum_to_period_totals():
    days = [_day(d, 540, 30) for d in range(2, 7)]
    report = _report("Alice Nguyen", days)

    rows = list(csv.reader(io.StringIO(render_csv(report))))
    day_rows = [r for r in rows[1:] if len(r) == len(ROW_HEADERS)]
    summary = {r[0]: r[1] for r in rows if len(r) == 2}

    worked = sum(parse_duration(r[5]) for r in day_rows)
    assert worked == parse_duration(summary["Total Hours"]) == 2700
    assert max(worked - 2400, 0) == parse_duration(summary["Overtime Hours"]) == 300
