from __future__ import annotations

from typing import Mapping, Optional

from ..core.constants import DEFAULT_TIMEZONE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_json, fetchall, fetchone
from .model import Location, Organization, TimeClockSettings
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(
        self,
        conn_factory: DatabaseConnection,
        *,
        default_settings: Optional[TimeClockSettings] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ):
        self._conn_factory = conn_factory
        self._default_settings = default_settings or TimeClockSettings()
        self._default_timezone = default_timezone

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, timezone, settings
                FROM organizations
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Organization(
                organization_id=int(r["organization_id"]),
                name=r["name"],
                timezone=r.get("timezone") or self._default_timezone,
                settings=TimeClockSettings.from_overrides(
                    decode_json(r.get("settings")),
                    defaults=self._default_settings,
                ),
            )

    def location_names(self, *, organization_id: int) -> Mapping[int, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT location_id, name FROM locations WHERE organization_id=%s",
                (int(organization_id),),
            )
            return {int(r["location_id"]): r["name"] for r in fetchall(cur)}

    def get_location(self, *, organization_id: int, location_id: int) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, organization_id, name
                FROM locations
                WHERE organization_id=%s AND location_id=%s
                """,
                (int(organization_id), int(location_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Location(
                location_id=int(r["location_id"]),
                organization_id=int(r["organization_id"]),
                name=r["name"],
            )
