from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import DenyReason, TimesheetStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.model import Principal
from . import guard
from .model import EditDecision, Timesheet

# (from, to) -> predicate name; approved/rejected have no outgoing edges.
TRANSITIONS = {
    (TimesheetStatus.DRAFT, TimesheetStatus.PENDING): "submit",
    (TimesheetStatus.PENDING, TimesheetStatus.APPROVED): "review",
    (TimesheetStatus.PENDING, TimesheetStatus.REJECTED): "review",
}

_DENY_MESSAGES = {
    DenyReason.STATUS_NOT_EDITABLE: "Timesheet status does not allow this change",
    DenyReason.NOT_SELF: "Cannot modify another employee's time",
    DenyReason.ROLE_INSUFFICIENT: "Your role does not allow this change",
}


def _enforce(decision: EditDecision, message: Optional[str] = None) -> None:
    if not decision.allowed:
        reason = decision.reason or DenyReason.ROLE_INSUFFICIENT
        raise AuthorizationError(message or _DENY_MESSAGES[reason], reason)


class TimesheetStateMachine:
    """Lifecycle: draft -> pending -> approved | rejected.

    Pure: decides and returns the new record, persistence belongs to the caller.
    """

    def edit_punch_entry(
        self,
        actor: Principal,
        *,
        employee_id: int,
        timesheet_status: Optional[TimesheetStatus],
        allows_self_edit: bool,
    ) -> None:
        _enforce(guard.can_edit(actor, employee_id, timesheet_status, allows_self_edit))

    def change_status(
        self,
        actor: Principal,
        timesheet: Timesheet,
        new_status: TimesheetStatus,
        *,
        comment: Optional[str] = None,
        now: datetime,
    ) -> Timesheet:
        """Return ``timesheet`` moved to ``new_status``, stamped with the review when one applies.

        Transitions missing from ``TRANSITIONS`` and role denials raise
        ``AuthorizationError``. A rejection without a comment is bad input from an
        allowed reviewer, so it raises ``ValidationError`` (HTTP 400) instead.
        """
        kind = TRANSITIONS.get((timesheet.status, new_status))
        if kind is None:
            raise AuthorizationError(
                f"Cannot change status from {timesheet.status.value} to {new_status.value}",
                DenyReason.STATUS_NOT_EDITABLE,
            )

        comment = (comment or "").strip() or None

        if kind == "submit":
            _enforce(guard.can_submit(actor, timesheet.employee_id))
            return replace(timesheet, status=new_status)

        _enforce(guard.can_change_status(actor), "Only admins, owners and managers can review timesheets")
        if new_status == TimesheetStatus.REJECTED and not comment:
            raise ValidationError("Review comment is required for rejection")

        return replace(
            timesheet,
            status=new_status,
            reviewed_by=actor.id,
            reviewed_at=now,
            review_comment=comment,
        )

    def check_update_or_delete(self, actor: Principal, timesheet: Timesheet) -> None:
        _enforce(guard.can_modify_timesheet(actor, timesheet.employee_id, timesheet.status))
