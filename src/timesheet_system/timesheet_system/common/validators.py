from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_date_range(start: Optional[str], end: Optional[str]) -> tuple[date, date]:
    if not start or not end:
        raise ValidationError("start_date and end_date are required")
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")
    return start_date, end_date


def optional_int(value: Optional[str], field_name: str) -> Optional[int]:
    v = (value or "").strip()
    if not v or v == "all":
        return None
    try:
        return int(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
