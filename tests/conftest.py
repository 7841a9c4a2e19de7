from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from timesheet_system.container import wire
from timesheet_system.core.enums import PunchType, Role, TimesheetStatus
from timesheet_system.employees.model import Employee, Principal
from timesheet_system.organizations.model import Location, Organization, TimeClockSettings
from timesheet_system.punches.model import PunchEvent
from timesheet_system.timesheets.model import Timesheet

ORG_ID = 1
ALICE = 10
BOB = 11
MANAGER = 20


def utc(y: int, m: int, d: int, hh: int = 0, mm: int = 0, ss: int = 0) -> datetime:
    return datetime(y, m, d, hh, mm, ss, tzinfo=timezone.utc)


def parse_duration(value: str) -> int:
    """Minutes back out of a ``"{h}h {m}m"`` export cell, to check rows add up."""
    total = 0
    for part in (value or "").split():
        if part.endswith("h"):
            total += int(part[:-1]) * 60
        elif part.endswith("m"):
            total += int(part[:-1])
        else:
            raise ValueError(f"Invalid duration: {value!r}")
    return total


class FakePunchRepo:
    def __init__(self):
        self._next_id = 1
        self.events: dict[int, PunchEvent] = {}

    def add(self, employee_id, punch_type, timestamp, *, location_id=None, organization_id=ORG_ID):
        event = PunchEvent(
            event_id=self._next_id,
            employee_id=employee_id,
            organization_id=organization_id,
            punch_type=PunchType(punch_type),
            timestamp=timestamp,
            location_id=location_id,
        )
        self.events[event.event_id] = event
        self._next_id += 1
        return event

    def list_between(self, *, organization_id, start_utc, end_utc, employee_id=None):
        out = [
            e
            for e in self.events.values()
            if e.organization_id == organization_id
            and start_utc <= e.timestamp < end_utc
            and (employee_id is None or e.employee_id == employee_id)
        ]
        return sorted(out, key=lambda e: (e.timestamp, e.event_id))

    def apply_manual(self, *, organization_id, employee_id, day_start_utc, day_end_utc, corrections, note=None):
        day = self.list_between(
            organization_id=organization_id,
            start_utc=day_start_utc,
            end_utc=day_end_utc,
            employee_id=employee_id,
        )
        latest = {e.punch_type: e.event_id for e in day}

        # Work on a copy; the store only changes once every correction went through.
        staged = dict(self.events)
        next_id = self._next_id
        event_ids = []
        for punch_type, timestamp in corrections:
            self.before_write(punch_type)
            existing = latest.get(punch_type)
            if existing is not None:
                current = staged[existing]
                staged[existing] = replace(
                    current,
                    timestamp=timestamp,
                    is_manual=True,
                    note=note if note is not None else current.note,
                )
                event_ids.append(existing)
                continue
            staged[next_id] = PunchEvent(
                event_id=next_id,
                employee_id=employee_id,
                organization_id=organization_id,
                punch_type=punch_type,
                timestamp=timestamp,
                is_manual=True,
                note=note,
            )
            event_ids.append(next_id)
            next_id += 1

        self.events = staged
        self._next_id = next_id
        return event_ids

    def before_write(self, punch_type):
        pass


class FakeEmployeeRepo:
    def __init__(self, employees=()):
        self.employees = {e.employee_id: e for e in employees}

    def get_by_id(self, *, organization_id, employee_id):
        e = self.employees.get(int(employee_id))
        return e if e and e.organization_id == organization_id else None

    def list_by_ids(self, *, organization_id, employee_ids):
        return [e for i in employee_ids if (e := self.get_by_id(organization_id=organization_id, employee_id=i))]


class FakeOrganizationRepo:
    def __init__(self, organizations=(), locations=()):
        self.organizations = {o.organization_id: o for o in organizations}
        self.locations = {loc.location_id: loc for loc in locations}

    def get_by_id(self, organization_id):
        return self.organizations.get(int(organization_id))

    def location_names(self, *, organization_id):
        return {i: loc.name for i, loc in self.locations.items() if loc.organization_id == organization_id}

    def get_location(self, *, organization_id, location_id):
        loc = self.locations.get(int(location_id))
        return loc if loc and loc.organization_id == organization_id else None


class FakeTimesheetRepo:
    def __init__(self):
        self._next_id = 1
        self.timesheets: dict[int, Timesheet] = {}
        self.saved_totals = {}

    def add(self, employee_id, period_start, period_end, status=TimesheetStatus.DRAFT, **kwargs):
        ts = Timesheet(
            timesheet_id=self._next_id,
            employee_id=employee_id,
            organization_id=kwargs.pop("organization_id", ORG_ID),
            period_start=period_start,
            period_end=period_end,
            status=TimesheetStatus(status),
            **kwargs,
        )
        self.timesheets[ts.timesheet_id] = ts
        self._next_id += 1
        return ts

    def get_by_id(self, *, organization_id, timesheet_id):
        ts = self.timesheets.get(int(timesheet_id))
        return ts if ts and ts.organization_id == organization_id else None

    def find_covering(self, *, organization_id, employee_id, day):
        matches = [
            ts
            for ts in self.timesheets.values()
            if ts.organization_id == organization_id and ts.employee_id == employee_id and ts.covers(day)
        ]
        matches.sort(key=lambda ts: (ts.period_start, ts.timesheet_id), reverse=True)
        return matches[0] if matches else None

    def list_overlapping(self, *, organization_id, start_date, end_date, employee_id=None):
        out = [
            ts
            for ts in self.timesheets.values()
            if ts.organization_id == organization_id
            and ts.period_start <= end_date
            and ts.period_end >= start_date
            and (employee_id is None or ts.employee_id == employee_id)
        ]
        return sorted(out, key=lambda ts: (ts.employee_id, ts.period_start))

    def save_review(self, *, timesheet_id, status, reviewed_by, reviewed_at, review_comment, totals=None):
        ts = self.timesheets.get(int(timesheet_id))
        if not ts:
            return False
        changes = dict(status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, review_comment=review_comment)
        if totals is not None:
            self.saved_totals[ts.timesheet_id] = totals
            changes.update(
                cached_total_hours=totals.total_hours,
                cached_break_hours=totals.break_hours,
                cached_overtime_hours=totals.overtime_hours,
            )
        self.timesheets[ts.timesheet_id] = replace(ts, **changes)
        return True

    def update_period(self, *, timesheet_id, period_start, period_end):
        ts = self.timesheets.get(int(timesheet_id))
        if not ts:
            return False
        self.timesheets[ts.timesheet_id] = replace(ts, period_start=period_start, period_end=period_end)
        return True

    def delete(self, *, timesheet_id):
        return self.timesheets.pop(int(timesheet_id), None) is not None


@pytest.fixture
def fixed_now():
    return utc(2026, 3, 20, 12, 0)


@pytest.fixture
def organization():
    return Organization(organization_id=ORG_ID, name="Acme", timezone="UTC", settings=TimeClockSettings())


@pytest.fixture
def punch_repo():
    return FakePunchRepo()


@pytest.fixture
def employee_repo():
    return FakeEmployeeRepo(
        [
            Employee(ALICE, ORG_ID, None, "Alice", "Nguyen"),
            Employee(BOB, ORG_ID, "Bob B.", "Bob", "Tran"),
            Employee(MANAGER, ORG_ID, None, "Mia", "Le", role=Role.MANAGER),
        ]
    )


@pytest.fixture
def organization_repo(organization):
    return FakeOrganizationRepo(
        [organization],
        [Location(1, ORG_ID, "HQ"), Location(2, ORG_ID, "Warehouse, North")],
    )


@pytest.fixture
def timesheet_repo():
    return FakeTimesheetRepo()


@pytest.fixture
def container(punch_repo, employee_repo, organization_repo, timesheet_repo, fixed_now):
    return wire(
        punches_repo=punch_repo,
        employees_repo=employee_repo,
        organizations_repo=organization_repo,
        timesheets_repo=timesheet_repo,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def alice():
    return Principal(id=ALICE, role=Role.EMPLOYEE, organization_id=ORG_ID)


@pytest.fixture
def bob():
    return Principal(id=BOB, role=Role.EMPLOYEE, organization_id=ORG_ID)


@pytest.fixture
def manager():
    return Principal(id=MANAGER, role=Role.MANAGER, organization_id=ORG_ID)


@pytest.fixture
def alice_week(punch_repo):
    """Mon 2026-03-02 and Tue 2026-03-03 for Alice: 450 + 480 minutes."""

    punch_repo.add(ALICE, "clock_in", utc(2026, 3, 2, 9, 0), location_id=1)
    punch_repo.add(ALICE, "break_start", utc(2026, 3, 2, 12, 0))
    punch_repo.add(ALICE, "break_end", utc(2026, 3, 2, 12, 30))
    punch_repo.add(ALICE, "clock_out", utc(2026, 3, 2, 17, 0))
    punch_repo.add(ALICE, "clock_in", utc(2026, 3, 3, 8, 0), location_id=2)
    punch_repo.add(ALICE, "clock_out", utc(2026, 3, 3, 16, 0))
    return date(2026, 3, 2), date(2026, 3, 3)
