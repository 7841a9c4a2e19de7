from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import TimesheetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PeriodTotals, Timesheet
from .repository import TimesheetRepository

_COLUMNS = """
    timesheet_id, employee_id, organization_id, period_start, period_end, status,
    reviewed_by, reviewed_at, review_comment, total_hours, break_hours, overtime_hours
"""


def _opt_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _to_timesheet(r: dict) -> Timesheet:
    return Timesheet(
        timesheet_id=int(r["timesheet_id"]),
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        period_start=r["period_start"],
        period_end=r["period_end"],
        status=TimesheetStatus(r["status"]),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        reviewed_at=as_utc(r["reviewed_at"]) if r.get("reviewed_at") else None,
        review_comment=r.get("review_comment"),
        cached_total_hours=_opt_float(r.get("total_hours")),
        cached_break_hours=_opt_float(r.get("break_hours")),
        cached_overtime_hours=_opt_float(r.get("overtime_hours")),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, organization_id: int, timesheet_id: int) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timesheets WHERE organization_id=%s AND timesheet_id=%s",
                (int(organization_id), int(timesheet_id)),
            )
            r = fetchone(cur)
            return _to_timesheet(r) if r else None

    def find_covering(self, *, organization_id: int, employee_id: int, day: date) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timesheets
                WHERE organization_id=%s AND employee_id=%s
                  AND period_start <= %s AND period_end >= %s
                ORDER BY period_start DESC, timesheet_id DESC
                LIMIT 1
                """,
                (int(organization_id), int(employee_id), day, day),
            )
            r = fetchone(cur)
            return _to_timesheet(r) if r else None

    def list_overlapping(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[Timesheet]:
        clauses = ["organization_id=%s", "period_start <= %s", "period_end >= %s"]
        params: list[object] = [int(organization_id), end_date, start_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timesheets WHERE {where} ORDER BY employee_id ASC, period_start ASC",
                tuple(params),
            )
            return [_to_timesheet(r) for r in fetchall(cur)]

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
        sets = ["status=%s", "reviewed_by=%s", "reviewed_at=%s", "review_comment=%s"]
        params: list[object] = [
            status.value,
            reviewed_by,
            as_utc(reviewed_at).replace(tzinfo=None) if reviewed_at else None,
            review_comment,
        ]
        if totals is not None:
            sets += ["total_hours=%s", "break_hours=%s", "overtime_hours=%s"]
            params += [totals.total_hours, totals.break_hours, totals.overtime_hours]
        params.append(int(timesheet_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE timesheets SET {', '.join(sets)} WHERE timesheet_id=%s", tuple(params))
            return cur.rowcount > 0

    def update_period(self, *, timesheet_id: int, period_start: date, period_end: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timesheets SET period_start=%s, period_end=%s WHERE timesheet_id=%s",
                (period_start, period_end, int(timesheet_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, timesheet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timesheets WHERE timesheet_id=%s", (int(timesheet_id),))
            return cur.rowcount > 0
