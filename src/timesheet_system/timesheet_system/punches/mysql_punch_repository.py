from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import PunchEvent
from .repository import PunchRepository


def _naive_utc(value: datetime) -> datetime:
    # punched_at is a DATETIME column holding UTC wall time.
    return as_utc(value).replace(tzinfo=None)


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(
        self,
        *,
        organization_id: int,
        start_utc: datetime,
        end_utc: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[PunchEvent]:
        clauses = ["organization_id=%s", "punched_at >= %s", "punched_at < %s"]
        params: list[object] = [int(organization_id), _naive_utc(start_utc), _naive_utc(end_utc)]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT event_id, employee_id, organization_id, punch_type, punched_at,
                       location_id, is_manual, note
                FROM punch_events
                WHERE {where}
                ORDER BY punched_at ASC, event_id ASC
                """,
                tuple(params),
            )
            return [
                PunchEvent(
                    event_id=int(r["event_id"]),
                    employee_id=int(r["employee_id"]),
                    organization_id=int(r["organization_id"]),
                    punch_type=PunchType(r["punch_type"]),
                    timestamp=as_utc(r["punched_at"]),
                    location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
                    is_manual=bool(r.get("is_manual")),
                    note=r.get("note"),
                )
                for r in fetchall(cur)
            ]

    def apply_manual(
        self,
        *,
        organization_id: int,
        employee_id: int,
        day_start_utc: datetime,
        day_end_utc: datetime,
        corrections: Sequence[tuple[PunchType, datetime]],
        note: Optional[str] = None,
    ) -> list[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the whole employee-day so concurrent corrections of it serialize.
            cur.execute(
                """
                SELECT event_id, punch_type
                FROM punch_events
                WHERE organization_id=%s AND employee_id=%s
                  AND punched_at >= %s AND punched_at < %s
                ORDER BY punched_at ASC, event_id ASC
                FOR UPDATE
                """,
                (int(organization_id), int(employee_id), _naive_utc(day_start_utc), _naive_utc(day_end_utc)),
            )
            latest: dict[str, int] = {}
            for r in fetchall(cur):
                latest[r["punch_type"]] = int(r["event_id"])

            event_ids: list[int] = []
            for punch_type, timestamp in corrections:
                existing = latest.get(punch_type.value)
                if existing is not None:
                    cur.execute(
                        """
                        UPDATE punch_events
                        SET punched_at=%s, is_manual=1, note=COALESCE(%s, note)
                        WHERE event_id=%s
                        """,
                        (_naive_utc(timestamp), note, existing),
                    )
                    event_ids.append(existing)
                    continue

                cur.execute(
                    """
                    INSERT INTO punch_events(employee_id, organization_id, punch_type, punched_at, is_manual, note)
                    VALUES(%s,%s,%s,%s,1,%s)
                    """,
                    (int(employee_id), int(organization_id), punch_type.value, _naive_utc(timestamp), note),
                )
                event_ids.append(int(cur.lastrowid))
            return event_ids
