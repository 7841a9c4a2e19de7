"""Turns aggregator output into a formatted ``TimesheetReport``.

Numbers are never re-derived here: every duration comes from a
``DayAggregate`` and every total from the ``PeriodTotals`` computed from the
same days.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from ..core.constants import NOT_AVAILABLE
from ..punches.model import DayAggregate
from ..timesheets.model import PeriodTotals
from .formatting import format_clock, format_day, format_duration, format_period
from .model import ReportRow, ReportSummary, TimesheetReport


@dataclass(frozen=True)
class ReportSection:
    employee_name: str
    days: Sequence[DayAggregate]
    totals: PeriodTotals
    status: Optional[str]


def build_row(employee_name: str, day: DayAggregate, *, tz: ZoneInfo, location_names: Mapping[int, str]) -> ReportRow:
    location = location_names.get(day.location_id) if day.location_id is not None else None
    return ReportRow(
        employee_name=employee_name,
        date=format_day(day.work_date),
        location=location or NOT_AVAILABLE,
        clock_in=format_clock(day.clock_in, tz),
        clock_out=format_clock(day.clock_out, tz),
        work_duration=format_duration(day.work_minutes),
        break_duration=format_duration(day.break_minutes),
        break_count=day.break_count,
    )


def build_summary(section: ReportSection, *, period_start: date, period_end: date) -> ReportSummary:
    return ReportSummary(
        employee_name=section.employee_name,
        period=format_period(period_start, period_end),
        total_hours=format_duration(section.totals.total_work_minutes),
        break_hours=format_duration(section.totals.total_break_minutes),
        overtime_hours=format_duration(section.totals.overtime_minutes),
        status=section.status or NOT_AVAILABLE,
        totals=section.totals,
    )


def build_report(
    *,
    title: str,
    period_start: date,
    period_end: date,
    sections: Sequence[ReportSection],
    tz: ZoneInfo,
    location_names: Mapping[int, str],
) -> TimesheetReport:
    rows: list[ReportRow] = []
    summaries: list[ReportSummary] = []
    for section in sections:
        rows.extend(
            build_row(section.employee_name, day, tz=tz, location_names=location_names)
            for day in sorted(section.days, key=lambda d: d.work_date)
        )
        summaries.append(build_summary(section, period_start=period_start, period_end=period_end))

    return TimesheetReport(
        title=title,
        period_start=period_start,
        period_end=period_end,
        rows=tuple(rows),
        summaries=tuple(summaries),
    )
