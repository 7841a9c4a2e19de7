from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..core.constants import ENTRY_KEY_SEPARATOR
from ..core.enums import Anomaly, PunchType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one observed clock action. ``timestamp`` is UTC-aware."""

    event_id: int
    employee_id: int
    organization_id: int
    punch_type: PunchType
    timestamp: datetime
    location_id: Optional[int] = None
    is_manual: bool = False
    note: Optional[str] = None


@dataclass(frozen=True)
class EntryKey:
    """Structured (employee, org-local day) key.

    The ``"{employee_id}_{date}"`` string form exists only at the API boundary.
    """

    employee_id: int
    work_date: date

    @classmethod
    def parse(cls, raw: str) -> "EntryKey":
        employee_part, sep, date_part = (raw or "").strip().rpartition(ENTRY_KEY_SEPARATOR)
        if not sep or not employee_part or not date_part:
            raise ValidationError("Invalid entry ID format")
        try:
            employee_id = int(employee_part)
        except ValueError:
            raise ValidationError("Invalid entry ID format")
        return cls(employee_id=employee_id, work_date=parse_iso_date(date_part))

    def __str__(self) -> str:
        return f"{self.employee_id}{ENTRY_KEY_SEPARATOR}{self.work_date.isoformat()}"


@dataclass(frozen=True)
class BreakInterval:
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return max(int((self.end - self.start).total_seconds() // 60), 0)


@dataclass(frozen=True)
class DayAggregate:
    """Read-model derived from one employee-day of punches. Never persisted."""

    employee_id: int
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    break_intervals: tuple[BreakInterval, ...]
    work_minutes: int
    break_minutes: int
    location_id: Optional[int]
    anomalies: tuple[Anomaly, ...] = ()

    @property
    def break_count(self) -> int:
        return len(self.break_intervals)


@dataclass(frozen=True)
class PunchCorrection:
    """Requested manual times for one employee-day; ``None`` leaves a punch untouched."""

    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "PunchCorrection":
        def pick(key: str) -> Optional[str]:
            value = payload.get(key)
            if value is None:
                return None
            return str(value).strip() or None

        return cls(
            clock_in=pick("clockInTime"),
            clock_out=pick("clockOutTime"),
            break_start=pick("breakStart"),
            break_end=pick("breakEnd"),
            note=pick("note") or pick("notes"),
        )

    def requested(self) -> list[tuple[PunchType, str]]:
        pairs = [
            (PunchType.CLOCK_IN, self.clock_in),
            (PunchType.CLOCK_OUT, self.clock_out),
            (PunchType.BREAK_START, self.break_start),
            (PunchType.BREAK_END, self.break_end),
        ]
        return [(t, v) for t, v in pairs if v]
