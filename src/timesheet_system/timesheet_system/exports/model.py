from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..timesheets.model import PeriodTotals

ROW_HEADERS = (
    "Employee",
    "Date",
    "Location",
    "Clock In",
    "Clock Out",
    "Work Duration",
    "Break Duration",
    "Breaks",
)


@dataclass(frozen=True)
class ReportRow:
    """One employee-day, already formatted. Both export forms print these strings."""

    employee_name: str
    date: str
    location: str
    clock_in: str
    clock_out: str
    work_duration: str
    break_duration: str
    break_count: int

    def cells(self) -> list[str]:
        return [
            self.employee_name,
            self.date,
            self.location,
            self.clock_in,
            self.clock_out,
            self.work_duration,
            self.break_duration,
            str(self.break_count),
        ]


@dataclass(frozen=True)
class ReportSummary:
    employee_name: str
    period: str
    total_hours: str
    break_hours: str
    overtime_hours: str
    status: str
    totals: PeriodTotals

    def lines(self) -> list[tuple[str, str]]:
        return [
            ("Employee", self.employee_name),
            ("Period", self.period),
            ("Total Hours", self.total_hours),
            ("Break Hours", self.break_hours),
            ("Overtime Hours", self.overtime_hours),
            ("Status", self.status),
        ]


@dataclass(frozen=True)
class TimesheetReport:
    title: str
    period_start: date
    period_end: date
    rows: tuple[ReportRow, ...]
    summaries: tuple[ReportSummary, ...]

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    mimetype: str
    filename: str
    disposition: str

    @property
    def content_disposition(self) -> str:
        return f'{self.disposition}; filename="{self.filename}"'
