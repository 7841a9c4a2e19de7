from __future__ import annotations

from typing import Iterable

from ..core.constants import DEFAULT_OVERTIME_THRESHOLD_MINUTES
from ..punches.model import DayAggregate
from .model import PeriodTotals


def aggregate_period(
    days: Iterable[DayAggregate],
    *,
    threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES,
) -> PeriodTotals:
    """Sum day aggregates and split regular/overtime with one flat cutoff per period."""

    total_work = 0
    total_break = 0
    for day in days:
        total_work += day.work_minutes
        total_break += day.break_minutes

    threshold = max(int(threshold_minutes), 0)
    return PeriodTotals(
        total_work_minutes=total_work,
        total_break_minutes=total_break,
        regular_minutes=min(total_work, threshold),
        overtime_minutes=max(0, total_work - threshold),
    )
