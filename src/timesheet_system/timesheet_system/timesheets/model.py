from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DenyReason, TimesheetStatus


@dataclass(frozen=True)
class Timesheet:
    """Domain entity: one employee's declared pay period.

    The cached_* hours are advisory only; consumer-facing numbers are always
    recomputed from punches.
    """

    timesheet_id: int
    employee_id: int
    organization_id: int
    period_start: date
    period_end: date
    status: TimesheetStatus
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    cached_total_hours: Optional[float] = None
    cached_break_hours: Optional[float] = None
    cached_overtime_hours: Optional[float] = None

    def covers(self, day: date) -> bool:
        return self.period_start <= day <= self.period_end


@dataclass(frozen=True)
class PeriodTotals:
    """Immutable read-model derived from day aggregates at call time."""

    total_work_minutes: int
    total_break_minutes: int
    regular_minutes: int
    overtime_minutes: int

    @property
    def total_hours(self) -> float:
        return round(self.total_work_minutes / 60, 2)

    @property
    def break_hours(self) -> float:
        return round(self.total_break_minutes / 60, 2)

    @property
    def overtime_hours(self) -> float:
        return round(self.overtime_minutes / 60, 2)

    def as_dict(self) -> dict:
        return {
            "total_hours": self.total_hours,
            "break_hours": self.break_hours,
            "overtime_hours": self.overtime_hours,
            "total_minutes": self.total_work_minutes,
            "break_minutes": self.total_break_minutes,
            "regular_minutes": self.regular_minutes,
            "overtime_minutes": self.overtime_minutes,
        }


@dataclass(frozen=True)
class EditDecision:
    allowed: bool
    reason: Optional[DenyReason] = None


@dataclass(frozen=True)
class BulkItemResult:
    timesheet_id: int
    success: bool
    error: Optional[str] = None
    reason: Optional[str] = None
