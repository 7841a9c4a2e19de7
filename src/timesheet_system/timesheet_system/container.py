from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_utc
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .exports.service import ExportService
from .organizations.model import TimeClockSettings
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository
from .punches.service import PunchService
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .timesheets.state_machine import TimesheetStateMachine


@dataclass(frozen=True)
class Container:
    punches_repo: PunchRepository
    employees_repo: EmployeeRepository
    organizations_repo: OrganizationRepository
    timesheets_repo: TimesheetRepository

    punch_service: PunchService
    timesheet_service: TimesheetService
    export_service: ExportService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    punches_repo: PunchRepository,
    employees_repo: EmployeeRepository,
    organizations_repo: OrganizationRepository,
    timesheets_repo: TimesheetRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    """Services over any set of repositories (MySQL in the app, in-memory fakes in tests)."""

    state_machine = TimesheetStateMachine()
    punch_service = PunchService(
        punches_repo,
        employees_repo,
        organizations_repo,
        timesheets_repo,
        state_machine=state_machine,
    )
    timesheet_service = TimesheetService(timesheets_repo, punch_service, state_machine=state_machine, clock=clock)
    export_service = ExportService(
        punch_service,
        timesheet_service,
        timesheets_repo,
        employees_repo,
        organizations_repo,
    )

    return Container(
        punches_repo=punches_repo,
        employees_repo=employees_repo,
        organizations_repo=organizations_repo,
        timesheets_repo=timesheets_repo,
        punch_service=punch_service,
        timesheet_service=timesheet_service,
        export_service=export_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    default_settings: Optional[TimeClockSettings] = None,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        punches_repo=MySQLPunchRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        organizations_repo=MySQLOrganizationRepository(
            conn,
            default_settings=default_settings,
            default_timezone=default_timezone,
        ),
        timesheets_repo=MySQLTimesheetRepository(conn),
        conn=conn,
    )
