from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import as_utc
from ..core.constants import NOT_AVAILABLE


def format_duration(minutes: int) -> str:
    """``"{h}h {m}m"`` when there are leftover minutes, else ``"{h}h"``."""
    minutes = max(int(minutes), 0)
    h, m = divmod(minutes, 60)
    return f"{h}h {m}m" if m > 0 else f"{h}h"


def format_clock(value: Optional[datetime], tz: ZoneInfo) -> str:
    """Org-local 12-hour time such as ``9:05 AM``."""
    if value is None:
        return NOT_AVAILABLE
    local = as_utc(value).astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_day(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_period(start: date, end: date) -> str:
    """``Mar 2 - Mar 15, 2026``."""
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}, {end.year}"
