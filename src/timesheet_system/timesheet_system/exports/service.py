from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import resolve_timezone
from ..common.validators import optional_int, require_date_range
from ..core.constants import NOT_AVAILABLE
from ..core.enums import DenyReason, ExportFormat
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee, Principal
from ..employees.repository import EmployeeRepository
from ..organizations.repository import OrganizationRepository
from ..punches.model import DayAggregate
from ..punches.service import PunchService
from ..timesheets import guard
from ..timesheets.model import Timesheet
from ..timesheets.period import aggregate_period
from ..timesheets.repository import TimesheetRepository
from ..timesheets.service import TimesheetService, parse_status
from .builder import ReportSection, build_report
from .csv_exporter import render_csv
from .model import ExportFile, TimesheetReport
from .pdf_exporter import render_pdf

logger = logging.getLogger(__name__)

TIMESHEET_TITLE = "Timesheet"
RANGE_TITLE = "Timesheet Report"


@dataclass(frozen=True)
class PreparedExport:
    report: TimesheetReport
    filename_stem: str


def parse_format(value: Optional[str]) -> ExportFormat:
    v = (value or "").strip().lower()
    if not v:
        return ExportFormat.CSV
    try:
        return ExportFormat(v)
    except ValueError:
        raise ValidationError(f"Unsupported export format: {value!r}")


def _status_label(timesheets: Sequence[Timesheet]) -> Optional[str]:
    statuses = list(dict.fromkeys(ts.status.value for ts in timesheets))
    return ", ".join(statuses) if statuses else None


def _covering(timesheets: Sequence[Timesheet], day: DayAggregate) -> Optional[Timesheet]:
    for ts in timesheets:
        if ts.covers(day.work_date):
            return ts
    return None


class ExportService:
    """Builds one report per request and renders it as CSV or PDF.

    Both renderers receive the same ``TimesheetReport`` so their numbers agree.
    """

    def __init__(
        self,
        punch_service: PunchService,
        timesheet_service: TimesheetService,
        timesheets: TimesheetRepository,
        employees: EmployeeRepository,
        organizations: OrganizationRepository,
    ):
        self._punch_service = punch_service
        self._timesheet_service = timesheet_service
        self._timesheets = timesheets
        self._employees = employees
        self._organizations = organizations

    def timesheet_report(self, principal: Principal, timesheet_id: int) -> PreparedExport:
        detail = self._timesheet_service.get_detail(principal, timesheet_id)
        ts = detail.timesheet
        org = self._punch_service.organization(ts.organization_id)
        employee = self._employees.get_by_id(organization_id=org.organization_id, employee_id=ts.employee_id)

        section = ReportSection(
            employee_name=employee.name if employee else "Unknown",
            days=detail.days,
            totals=detail.totals,
            status=ts.status.value,
        )
        report = build_report(
            title=TIMESHEET_TITLE,
            period_start=ts.period_start,
            period_end=ts.period_end,
            sections=[section],
            tz=resolve_timezone(org.timezone),
            location_names=self._organizations.location_names(organization_id=org.organization_id),
        )
        return PreparedExport(report=report, filename_stem=f"timesheet-{ts.period_start.isoformat()}")

    def _resolve_employee(self, principal: Principal, employee_id: Optional[int]) -> Optional[int]:
        if guard.is_privileged(principal.role):
            return employee_id
        if employee_id is not None and employee_id != principal.id:
            raise AuthorizationError("Cannot export another employee's time", DenyReason.NOT_SELF)
        return principal.id

    def range_report(
        self,
        principal: Principal,
        *,
        start_date: Optional[str],
        end_date: Optional[str],
        status: Optional[str] = None,
        employee_id: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> PreparedExport:
        start, end = require_date_range(start_date, end_date)
        status_filter = parse_status(status) if status and status.strip().lower() != "all" else None
        location_filter = optional_int(location_id, "location_id")
        target_id = self._resolve_employee(principal, optional_int(employee_id, "employee_id"))

        org = self._punch_service.organization(principal.organization_id)
        org_id = org.organization_id
        tz = resolve_timezone(org.timezone)

        if target_id is not None and not self._employees.get_by_id(organization_id=org_id, employee_id=target_id):
            raise NotFoundError("Employee not found")
        if location_filter is not None and not self._organizations.get_location(
            organization_id=org_id, location_id=location_filter
        ):
            raise NotFoundError("Location not found")

        days = self._punch_service.day_aggregates(
            organization_id=org_id,
            tz=tz,
            start_date=start,
            end_date=end,
            employee_id=target_id,
        )
        timesheets_by_employee: dict[int, list[Timesheet]] = defaultdict(list)
        for ts in self._timesheets.list_overlapping(
            organization_id=org_id, start_date=start, end_date=end, employee_id=target_id
        ):
            timesheets_by_employee[ts.employee_id].append(ts)

        days_by_employee: dict[int, list[DayAggregate]] = defaultdict(list)
        for day in days:
            if location_filter is not None and day.location_id != location_filter:
                continue
            if status_filter is not None:
                covering = _covering(timesheets_by_employee[day.employee_id], day)
                if covering is None or covering.status != status_filter:
                    continue
            days_by_employee[day.employee_id].append(day)

        if target_id is not None:
            days_by_employee.setdefault(target_id, [])

        employees = {
            e.employee_id: e
            for e in self._employees.list_by_ids(organization_id=org_id, employee_ids=sorted(days_by_employee))
        }
        threshold = org.settings.overtime_threshold_minutes

        def _name(eid: int) -> str:
            employee: Optional[Employee] = employees.get(eid)
            return employee.name if employee else "Unknown"

        sections = [
            ReportSection(
                employee_name=_name(eid),
                days=days_by_employee[eid],
                totals=aggregate_period(days_by_employee[eid], threshold_minutes=threshold),
                status=_status_label(timesheets_by_employee.get(eid, [])) or NOT_AVAILABLE,
            )
            for eid in sorted(days_by_employee, key=lambda i: (_name(i).lower(), i))
        ]

        report = build_report(
            title=RANGE_TITLE,
            period_start=start,
            period_end=end,
            sections=sections,
            tz=tz,
            location_names=self._organizations.location_names(organization_id=org_id),
        )
        logger.info(
            "range export org=%s %s..%s employees=%s rows=%s by=%s",
            org_id,
            start.isoformat(),
            end.isoformat(),
            len(sections),
            len(report.rows),
            principal.id,
        )
        return PreparedExport(report=report, filename_stem=f"timesheets_{start.isoformat()}_{end.isoformat()}")

    def render(self, prepared: PreparedExport, fmt: Optional[str]) -> ExportFile:
        export_format = parse_format(fmt)
        if export_format == ExportFormat.PDF:
            return ExportFile(
                content=render_pdf(prepared.report),
                mimetype="application/pdf",
                filename=f"{prepared.filename_stem}.pdf",
                disposition="inline",
            )
        return ExportFile(
            content=render_csv(prepared.report).encode("utf-8"),
            mimetype="text/csv",
            filename=f"{prepared.filename_stem}.csv",
            disposition="attachment",
        )
