from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, *, organization_id: int, employee_id: int) -> Optional[Employee]:
        """Return the employee only when it belongs to the organization."""

        raise NotImplementedError

    def list_by_ids(self, *, organization_id: int, employee_ids: Sequence[int]) -> Sequence[Employee]:
        raise NotImplementedError
