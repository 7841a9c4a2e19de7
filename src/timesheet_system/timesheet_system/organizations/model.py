from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_OVERTIME_THRESHOLD_MINUTES, DEFAULT_TIMEZONE


_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


def _coerce_minutes(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class TimeClockSettings:
    """Typed view over the organization's persisted ``time_clock`` settings."""

    allow_manual_time_entry: bool = True
    require_notes_for_manual_entry: bool = True
    overtime_threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES

    @classmethod
    def from_overrides(
        cls,
        raw: Optional[Mapping[str, Any]],
        *,
        defaults: Optional["TimeClockSettings"] = None,
    ) -> "TimeClockSettings":
        """Merge persisted overrides over the defaults.

        Unknown keys are ignored. Values are coerced to the field's type; booleans
        accept true/false, 1/0 and yes/no, and anything unreadable keeps the default.
        """

        base = defaults or cls()
        overrides = dict((raw or {}).get("time_clock") or {})
        values: dict[str, Any] = {}
        for f in fields(cls):
            current = getattr(base, f.name)
            if f.name not in overrides or overrides[f.name] is None:
                values[f.name] = current
            elif isinstance(current, bool):
                values[f.name] = _coerce_bool(overrides[f.name], current)
            else:
                values[f.name] = _coerce_minutes(overrides[f.name], current)
        return cls(**values)


@dataclass(frozen=True)
class Organization:
    organization_id: int
    name: str
    timezone: str = DEFAULT_TIMEZONE
    settings: TimeClockSettings = field(default_factory=TimeClockSettings)


@dataclass(frozen=True)
class Location:
    location_id: int
    organization_id: int
    name: str
