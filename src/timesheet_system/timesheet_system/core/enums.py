from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles resolved by the auth collaborator."""

    ADMIN = "admin"
    OWNER = "owner"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class PunchType(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


class TimesheetStatus(str, Enum):
    """Review lifecycle of a timesheet."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Anomaly(str, Enum):
    """Advisory flags raised while pairing punches. Never fatal."""

    ORPHAN_CLOCK_OUT = "orphan_clock_out"
    NEGATIVE_DURATION = "negative_duration"
    OVERFLOW_DURATION = "overflow_duration"
    UNCLOSED_CLOCK_IN = "unclosed_clock_in"
    UNCLOSED_BREAK = "unclosed_break"


class DenyReason(str, Enum):
    STATUS_NOT_EDITABLE = "status_not_editable"
    NOT_SELF = "not_self"
    ROLE_INSUFFICIENT = "role_insufficient"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"


def parse_role(value: str | None) -> Role:
    """Unknown or missing roles resolve to the least-privileged role."""
    try:
        return Role((value or "").strip().lower())
    except ValueError:
        return Role.EMPLOYEE
