from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Principal:
    """Already-authenticated actor handed to the core by the auth collaborator."""

    id: int
    role: Role
    organization_id: int


@dataclass(frozen=True)
class Employee:
    employee_id: int
    organization_id: int
    display_name: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    role: Role = Role.EMPLOYEE
    # None inherits the organization's allow_manual_time_entry setting
    allow_time_edit: Optional[bool] = None

    @property
    def name(self) -> str:
        if self.display_name and self.display_name.strip():
            return self.display_name.strip()
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or "Unknown"
