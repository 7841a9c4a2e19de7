from __future__ import annotations

import pytest

from timesheet_system.core.enums import DenyReason, Role, TimesheetStatus
from timesheet_system.employees.model import Principal
from timesheet_system.timesheets import guard


def _actor(role: Role, actor_id: int = 1) -> Principal:
    return Principal(id=actor_id, role=role, organization_id=1)


@pytest.mark.parametrize("role", [Role.ADMIN, Role.OWNER, Role.MANAGER])
def test_privileged_roles_edit_anyone_while_editable(role):
    for status in (None, TimesheetStatus.DRAFT, TimesheetStatus.PENDING):
        decision = guard.can_edit(_actor(role), 99, status, allows_self_edit=False)
        assert decision.allowed


@pytest.mark.parametrize("status", [TimesheetStatus.APPROVED, TimesheetStatus.REJECTED])
def test_closed_statuses_deny_everyone(status):
    for role in Role:
        decision = guard.can_edit(_actor(role), 1, status, allows_self_edit=True)
        assert not decision.allowed
        assert decision.reason == DenyReason.STATUS_NOT_EDITABLE


def test_employee_edits_only_self_and_only_when_allowed():
    me = _actor(Role.EMPLOYEE, 5)

    assert guard.can_edit(me, 5, TimesheetStatus.DRAFT, allows_self_edit=True).allowed
    assert guard.can_edit(me, 6, None, allows_self_edit=True).reason == DenyReason.NOT_SELF
    assert guard.can_edit(me, 5, None, allows_self_edit=False).reason == DenyReason.ROLE_INSUFFICIENT


def test_review_reserved_for_privileged_roles():
    assert guard.can_change_status(_actor(Role.MANAGER)).allowed
    assert guard.can_change_status(_actor(Role.EMPLOYEE)).reason == DenyReason.ROLE_INSUFFICIENT


def test_timesheet_modification_only_in_draft():
    me = _actor(Role.EMPLOYEE, 5)

    assert guard.can_modify_timesheet(me, 5, TimesheetStatus.DRAFT).allowed
    assert guard.can_modify_timesheet(me, 5, TimesheetStatus.PENDING).reason == DenyReason.STATUS_NOT_EDITABLE
    assert guard.can_modify_timesheet(me, 6, TimesheetStatus.DRAFT).reason == DenyReason.NOT_SELF
    assert not guard.can_modify_timesheet(_actor(Role.ADMIN), 6, TimesheetStatus.APPROVED).allowed
