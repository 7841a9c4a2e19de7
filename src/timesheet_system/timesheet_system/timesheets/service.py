from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, resolve_timezone
from ..common.validators import require_date_range
from ..core.enums import TimesheetStatus
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from ..employees.model import Principal
from ..punches.model import DayAggregate
from ..punches.service import PunchService
from . import guard
from .model import BulkItemResult, PeriodTotals, Timesheet
from .period import aggregate_period
from .repository import TimesheetRepository
from .state_machine import TimesheetStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimesheetDetail:
    timesheet: Timesheet
    days: list[DayAggregate]
    totals: PeriodTotals


def parse_status(value: Optional[str]) -> TimesheetStatus:
    try:
        return TimesheetStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid status: {value!r}")


class TimesheetService:
    def __init__(
        self,
        timesheets: TimesheetRepository,
        punch_service: PunchService,
        *,
        state_machine: Optional[TimesheetStateMachine] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._timesheets = timesheets
        self._punch_service = punch_service
        self._state_machine = state_machine or TimesheetStateMachine()
        self._clock = clock

    def _load(self, principal: Principal, timesheet_id: int) -> Timesheet:
        ts = self._timesheets.get_by_id(organization_id=principal.organization_id, timesheet_id=int(timesheet_id))
        if not ts:
            raise NotFoundError("Timesheet not found")
        return ts

    def recompute(self, timesheet: Timesheet) -> TimesheetDetail:
        """Fresh totals from punches; the cached hours on the record are ignored."""

        org = self._punch_service.organization(timesheet.organization_id)
        days = self._punch_service.day_aggregates(
            organization_id=timesheet.organization_id,
            tz=resolve_timezone(org.timezone),
            start_date=timesheet.period_start,
            end_date=timesheet.period_end,
            employee_id=timesheet.employee_id,
        )
        totals = aggregate_period(days, threshold_minutes=org.settings.overtime_threshold_minutes)
        return TimesheetDetail(timesheet=timesheet, days=days, totals=totals)

    def get_detail(self, principal: Principal, timesheet_id: int) -> TimesheetDetail:
        ts = self._load(principal, timesheet_id)
        decision = guard.can_view(principal, ts.employee_id)
        if not decision.allowed:
            raise AuthorizationError("Forbidden", decision.reason)
        return self.recompute(ts)

    def change_status(
        self,
        principal: Principal,
        timesheet_id: int,
        status: str,
        *,
        review_comment: Optional[str] = None,
    ) -> Timesheet:
        new_status = parse_status(status)
        current = self._load(principal, timesheet_id)
        updated = self._state_machine.change_status(
            principal,
            current,
            new_status,
            comment=review_comment,
            now=self._clock(),
        )

        totals = None
        if new_status in (TimesheetStatus.APPROVED, TimesheetStatus.REJECTED):
            totals = self.recompute(updated).totals

        ok = self._timesheets.save_review(
            timesheet_id=updated.timesheet_id,
            status=updated.status,
            reviewed_by=updated.reviewed_by,
            reviewed_at=updated.reviewed_at,
            review_comment=updated.review_comment,
            totals=totals,
        )
        if not ok:
            raise NotFoundError("Timesheet not found")

        logger.info(
            "timesheet %s status %s -> %s by %s",
            updated.timesheet_id,
            current.status.value,
            updated.status.value,
            principal.id,
        )
        return updated

    def bulk_change_status(
        self,
        principal: Principal,
        timesheet_ids: Sequence[int],
        status: str,
        *,
        review_comment: Optional[str] = None,
    ) -> list[BulkItemResult]:
        """Not atomic: each item succeeds or fails on its own so failures can be retried."""

        if not timesheet_ids:
            raise ValidationError("timesheet_ids is required and cannot be empty")
        try:
            ids = [int(i) for i in timesheet_ids]
        except (TypeError, ValueError):
            raise ValidationError("timesheet_ids must be integers")
        parse_status(status)

        results: list[BulkItemResult] = []
        for timesheet_id in ids:
            try:
                self.change_status(principal, timesheet_id, status, review_comment=review_comment)
                results.append(BulkItemResult(timesheet_id=timesheet_id, success=True))
            except DomainError as e:
                reason = getattr(e, "reason", None)
                logger.warning("bulk status change failed for timesheet %s: %s", timesheet_id, e)
                results.append(
                    BulkItemResult(
                        timesheet_id=timesheet_id,
                        success=False,
                        error=str(e),
                        reason=reason.value if reason else None,
                    )
                )
        return results

    def update_period(self, principal: Principal, timesheet_id: int, *, period_start: str, period_end: str) -> Timesheet:
        start, end = require_date_range(period_start, period_end)
        ts = self._load(principal, timesheet_id)
        self._state_machine.check_update_or_delete(principal, ts)

        if not self._timesheets.update_period(timesheet_id=ts.timesheet_id, period_start=start, period_end=end):
            raise NotFoundError("Timesheet not found")
        return replace(ts, period_start=start, period_end=end)

    def delete(self, principal: Principal, timesheet_id: int) -> None:
        ts = self._load(principal, timesheet_id)
        self._state_machine.check_update_or_delete(principal, ts)
        if not self._timesheets.delete(timesheet_id=ts.timesheet_id):
            raise NotFoundError("Timesheet not found")
        logger.info("timesheet %s deleted by %s", ts.timesheet_id, principal.id)
