from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import parse_duration

from timesheet_system.exports.formatting import format_clock, format_duration, format_period


@pytest.mark.parametrize("minutes,expected", [(0, "0h"), (45, "0h 45m"), (450, "7h 30m"), (480, "8h"), (2700, "45h")])
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected
    assert parse_duration(expected) == minutes


def test_format_clock_in_organization_timezone():
    ts = datetime(2026, 3, 2, 14, 5, tzinfo=timezone.utc)

    assert format_clock(ts, ZoneInfo("UTC")) == "2:05 PM"
    assert format_clock(ts, ZoneInfo("America/New_York")) == "9:05 AM"
    assert format_clock(datetime(2026, 3, 2, 0, 0, tzinfo=timezone.utc), ZoneInfo("UTC")) == "12:00 AM"
    assert format_clock(None, ZoneInfo("UTC")) == "N/A"


def test_format_period():
    assert format_period(date(2026, 3, 2), date(2026, 3, 15)) == "Mar 2 - Mar 15, 2026"
