from __future__ import annotations

from datetime import date

import pytest

from timesheet_system.core.enums import PunchType
from timesheet_system.core.exceptions import ValidationError
from timesheet_system.punches.model import EntryKey, PunchCorrection


def test_entry_key_parses_api_form():
    key = EntryKey.parse("42_2026-03-02")

    assert key == EntryKey(employee_id=42, work_date=date(2026, 3, 2))
    assert str(key) == "42_2026-03-02"


@pytest.mark.parametrize("raw", ["", "42", "abc_2026-03-02", "42_2026-13-40", "_2026-03-02"])
def test_entry_key_rejects_malformed_ids(raw):
    with pytest.raises(ValidationError):
        EntryKey.parse(raw)


def test_correction_reads_camel_case_payload_and_skips_blanks():
    correction = PunchCorrection.from_payload(
        {"clockInTime": "09:00", "clockOutTime": "  ", "breakStart": None, "breakEnd": "12:30", "notes": "forgot"}
    )

    assert correction.requested() == [(PunchType.CLOCK_IN, "09:00"), (PunchType.BREAK_END, "12:30")]
    assert correction.note == "forgot"
