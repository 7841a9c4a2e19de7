"""Event pairing: turns one employee-day of punches into a ``DayAggregate``.

The functions here are pure. They never raise on bad data; problems such as
an orphan clock-out degrade to a zero-minute contribution plus an ``Anomaly``
flag that the calling service logs.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import local_date
from ..core.constants import MAX_SESSION_MINUTES
from ..core.enums import Anomaly, PunchType
from .model import BreakInterval, DayAggregate, EntryKey, PunchEvent


def _to_minute(ts: datetime) -> datetime:
    return ts.replace(second=0, microsecond=0)


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def _overlap_minutes(interval: BreakInterval, start: datetime, end: datetime) -> int:
    lo = max(interval.start, start)
    hi = min(interval.end, end)
    if hi <= lo:
        return 0
    return _minutes_between(lo, hi)


def _session_minutes(
    clock_in: datetime,
    clock_out: datetime,
    breaks: Sequence[BreakInterval],
    anomalies: list[Anomaly],
) -> int:
    raw = _minutes_between(clock_in, clock_out)
    if raw > MAX_SESSION_MINUTES:
        anomalies.append(Anomaly.OVERFLOW_DURATION)
        return 0

    net = raw - sum(_overlap_minutes(b, clock_in, clock_out) for b in breaks)
    if net < 0:
        anomalies.append(Anomaly.NEGATIVE_DURATION)
        return 0
    return net


def aggregate_day(employee_id: int, work_date: date, events: Iterable[PunchEvent]) -> DayAggregate:
    """Pair one employee-day of punches in a single forward pass.

    Rules:
    - ``clock_in`` overwrites any unmatched earlier clock-in (last one wins)
      and sets the day's location.
    - ``clock_out`` closes the open clock-in; completed breaks overlapping the
      session are subtracted. Without an open clock-in it is shown but adds
      nothing and flags ``orphan_clock_out``.
    - ``break_start``/``break_end`` pair the same way; a lone ``break_end`` is
      ignored without a flag.

    Events are re-sorted by (timestamp, event_id) so equal timestamps always
    pair the same way, and timestamps are truncated to the minute.
    """

    ordered = sorted(events, key=lambda e: (e.timestamp, e.event_id))

    open_clock_in: Optional[datetime] = None
    open_break: Optional[datetime] = None
    first_clock_in: Optional[datetime] = None
    last_clock_out: Optional[datetime] = None
    location_id: Optional[int] = None
    breaks: list[BreakInterval] = []
    anomalies: list[Anomaly] = []
    work_minutes = 0

    for event in ordered:
        ts = _to_minute(event.timestamp)

        if event.punch_type == PunchType.CLOCK_IN:
            open_clock_in = ts
            location_id = event.location_id

        elif event.punch_type == PunchType.CLOCK_OUT:
            last_clock_out = ts
            if open_clock_in is None:
                anomalies.append(Anomaly.ORPHAN_CLOCK_OUT)
                continue
            if first_clock_in is None:
                first_clock_in = open_clock_in
            work_minutes += _session_minutes(open_clock_in, ts, breaks, anomalies)
            open_clock_in = None

        elif event.punch_type == PunchType.BREAK_START:
            open_break = ts

        elif event.punch_type == PunchType.BREAK_END:
            if open_break is None:
                continue
            breaks.append(BreakInterval(start=open_break, end=ts))
            open_break = None

    if open_clock_in is not None:
        if first_clock_in is None:
            first_clock_in = open_clock_in
        anomalies.append(Anomaly.UNCLOSED_CLOCK_IN)
    if open_break is not None:
        anomalies.append(Anomaly.UNCLOSED_BREAK)

    return DayAggregate(
        employee_id=employee_id,
        work_date=work_date,
        clock_in=first_clock_in,
        clock_out=last_clock_out,
        break_intervals=tuple(breaks),
        work_minutes=work_minutes,
        break_minutes=sum(b.minutes for b in breaks),
        location_id=location_id,
        anomalies=tuple(dict.fromkeys(anomalies)),
    )


def group_by_local_day(events: Iterable[PunchEvent], tz: ZoneInfo) -> dict[EntryKey, list[PunchEvent]]:
    """Partition a snapshot by (employee, org-local calendar date), keys sorted."""

    grouped: dict[EntryKey, list[PunchEvent]] = defaultdict(list)
    for event in events:
        key = EntryKey(employee_id=event.employee_id, work_date=local_date(event.timestamp, tz))
        grouped[key].append(event)
    return {k: grouped[k] for k in sorted(grouped, key=lambda k: (k.employee_id, k.work_date))}


def aggregate_days(events: Iterable[PunchEvent], tz: ZoneInfo) -> list[DayAggregate]:
    """Aggregate every employee-day in the snapshot, ordered by employee then date."""

    return [aggregate_day(key.employee_id, key.work_date, day_events) for key, day_events in group_by_local_day(events, tz).items()]
