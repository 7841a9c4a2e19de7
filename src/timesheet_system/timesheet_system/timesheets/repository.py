from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimesheetStatus
from .model import PeriodTotals, Timesheet


class TimesheetRepository(Protocol):
    def get_by_id(self, *, organization_id: int, timesheet_id: int) -> Optional[Timesheet]:
        raise NotImplementedError

    def find_covering(self, *, organization_id: int, employee_id: int, day: date) -> Optional[Timesheet]:
        """The timesheet whose [period_start, period_end] contains ``day``."""

        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[Timesheet]:
        raise NotImplementedError

    def save_review(
        self,
        *,
        timesheet_id: int,
        status: TimesheetStatus,
        reviewed_by: Optional[int],
        reviewed_at: Optional[datetime],
        review_comment: Optional[str],
        totals: Optional[PeriodTotals] = None,
    ) -> bool:
        """Persist a status transition; ``totals`` refreshes the advisory cache."""

        raise NotImplementedError

    def update_period(self, *, timesheet_id: int, period_start: date, period_end: date) -> bool:
        raise NotImplementedError

    def delete(self, *, timesheet_id: int) -> bool:
        raise NotImplementedError
