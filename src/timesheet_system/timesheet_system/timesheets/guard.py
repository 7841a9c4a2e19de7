"""Edit authorization guard.

The single place where role logic lives. Every predicate is pure and total:
it answers allow/deny with a reason and never raises.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import DenyReason, Role, TimesheetStatus
from ..employees.model import Principal
from .model import EditDecision

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.OWNER, Role.MANAGER})
EDITABLE_STATUSES = frozenset({TimesheetStatus.DRAFT, TimesheetStatus.PENDING})

ALLOW = EditDecision(allowed=True)


def is_privileged(role: Role) -> bool:
    return role in PRIVILEGED_ROLES


def deny(reason: DenyReason) -> EditDecision:
    return EditDecision(allowed=False, reason=reason)


def can_edit(
    actor: Principal,
    employee_id: int,
    timesheet_status: Optional[TimesheetStatus],
    allows_self_edit: bool,
) -> EditDecision:
    """May ``actor`` mutate the punches of ``employee_id`` right now?

    ``timesheet_status`` is None when no timesheet covers the day yet.
    """

    if timesheet_status is not None and timesheet_status not in EDITABLE_STATUSES:
        return deny(DenyReason.STATUS_NOT_EDITABLE)
    if is_privileged(actor.role):
        return ALLOW
    if actor.id != employee_id:
        return deny(DenyReason.NOT_SELF)
    if not allows_self_edit:
        return deny(DenyReason.ROLE_INSUFFICIENT)
    return ALLOW


def can_change_status(actor: Principal) -> EditDecision:
    """Review decisions (approve/reject) are reserved to privileged roles."""
    return ALLOW if is_privileged(actor.role) else deny(DenyReason.ROLE_INSUFFICIENT)


def can_submit(actor: Principal, owner_id: int) -> EditDecision:
    if is_privileged(actor.role) or actor.id == owner_id:
        return ALLOW
    return deny(DenyReason.NOT_SELF)


def can_modify_timesheet(actor: Principal, owner_id: int, status: TimesheetStatus) -> EditDecision:
    """Period bounds may change, or the record be deleted, only while draft."""
    if status != TimesheetStatus.DRAFT:
        return deny(DenyReason.STATUS_NOT_EDITABLE)
    return can_submit(actor, owner_id)


def can_view(actor: Principal, owner_id: int) -> EditDecision:
    return can_submit(actor, owner_id)
