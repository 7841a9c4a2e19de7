from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import day_bounds_utc, local_to_utc, parse_clock_time, resolve_timezone
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee, Principal
from ..employees.repository import EmployeeRepository
from ..organizations.model import Organization
from ..organizations.repository import OrganizationRepository
from ..timesheets.repository import TimesheetRepository
from ..timesheets.state_machine import TimesheetStateMachine
from .aggregator import aggregate_day, aggregate_days
from .model import DayAggregate, EntryKey, PunchCorrection, PunchEvent
from .repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeContext:
    employee: Employee
    organization: Organization
    tz: ZoneInfo

    @property
    def allows_self_edit(self) -> bool:
        if self.employee.allow_time_edit is not None:
            return self.employee.allow_time_edit
        return self.organization.settings.allow_manual_time_entry


def log_anomalies(days: Sequence[DayAggregate]) -> None:
    for day in days:
        if day.anomalies:
            logger.warning(
                "punch anomalies employee=%s date=%s flags=%s",
                day.employee_id,
                day.work_date.isoformat(),
                ",".join(a.value for a in day.anomalies),
            )


class PunchService:
    """Event store access: consistent snapshots in, manual corrections out."""

    def __init__(
        self,
        punches: PunchRepository,
        employees: EmployeeRepository,
        organizations: OrganizationRepository,
        timesheets: TimesheetRepository,
        *,
        state_machine: Optional[TimesheetStateMachine] = None,
    ):
        self._punches = punches
        self._employees = employees
        self._organizations = organizations
        self._timesheets = timesheets
        self._state_machine = state_machine or TimesheetStateMachine()

    def organization(self, organization_id: int) -> Organization:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def context(self, principal: Principal, employee_id: int) -> EmployeeContext:
        org = self.organization(principal.organization_id)
        employee = self._employees.get_by_id(organization_id=org.organization_id, employee_id=int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return EmployeeContext(employee=employee, organization=org, tz=resolve_timezone(org.timezone))

    def snapshot(
        self,
        *,
        organization_id: int,
        tz: ZoneInfo,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[PunchEvent]:
        start_utc, end_utc = day_bounds_utc(start_date, end_date, tz)
        return self._punches.list_between(
            organization_id=organization_id,
            start_utc=start_utc,
            end_utc=end_utc,
            employee_id=employee_id,
        )

    def day_aggregates(
        self,
        *,
        organization_id: int,
        tz: ZoneInfo,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> list[DayAggregate]:
        events = self.snapshot(
            organization_id=organization_id,
            tz=tz,
            start_date=start_date,
            end_date=end_date,
            employee_id=employee_id,
        )
        days = aggregate_days(events, tz)
        log_anomalies(days)
        return days

    def get_day(self, principal: Principal, key: EntryKey) -> DayAggregate:
        ctx = self.context(principal, key.employee_id)
        events = self.snapshot(
            organization_id=ctx.organization.organization_id,
            tz=ctx.tz,
            start_date=key.work_date,
            end_date=key.work_date,
            employee_id=key.employee_id,
        )
        day = aggregate_day(key.employee_id, key.work_date, events)
        log_anomalies([day])
        return day

    def apply_correction(self, principal: Principal, entry_id: str, payload: dict) -> DayAggregate:
        """Find-or-create-then-update the requested punches of one employee-day, all or nothing."""

        key = EntryKey.parse(entry_id)
        correction = PunchCorrection.from_payload(payload or {})
        requested = [(punch_type, parse_clock_time(value)) for punch_type, value in correction.requested()]

        ctx = self.context(principal, key.employee_id)
        covering = self._timesheets.find_covering(
            organization_id=ctx.organization.organization_id,
            employee_id=key.employee_id,
            day=key.work_date,
        )
        self._state_machine.edit_punch_entry(
            principal,
            employee_id=key.employee_id,
            timesheet_status=covering.status if covering else None,
            allows_self_edit=ctx.allows_self_edit,
        )

        if requested and ctx.organization.settings.require_notes_for_manual_entry and not correction.note:
            raise ValidationError("Notes are required when editing time entries")

        if not requested:
            return self.get_day(principal, key)

        day_start, day_end = day_bounds_utc(key.work_date, key.work_date, ctx.tz)
        corrections = [(punch_type, local_to_utc(key.work_date, clock, ctx.tz)) for punch_type, clock in requested]
        event_ids = self._punches.apply_manual(
            organization_id=ctx.organization.organization_id,
            employee_id=key.employee_id,
            day_start_utc=day_start,
            day_end_utc=day_end,
            corrections=corrections,
            note=correction.note,
        )
        for (punch_type, _), event_id in zip(corrections, event_ids):
            logger.info(
                "manual punch %s employee=%s date=%s event=%s by=%s",
                punch_type.value,
                key.employee_id,
                key.work_date.isoformat(),
                event_id,
                principal.id,
            )

        return self.get_day(principal, key)
