from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import PunchEvent


class PunchRepository(Protocol):
    def list_between(
        self,
        *,
        organization_id: int,
        start_utc: datetime,
        end_utc: datetime,
        employee_id: Optional[int] = None,
    ) -> Sequence[PunchEvent]:
        """Events in [start_utc, end_utc) ordered by timestamp, then id."""

        raise NotImplementedError

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
        """Apply every correction of one employee-day in a single transaction.

        Each ``(punch_type, timestamp)`` overwrites the latest event of that type
        in the day window, or inserts one when the day has none. Always sets
        ``is_manual``. Earlier duplicates of the same type are left untouched, so
        moving a duplicated clock-in before its older twin hands the pairing to
        the twin; the day then still reads the older punch. Returns the event ids
        in ``corrections`` order; nothing is persisted if any step fails.
        """

        raise NotImplementedError
