from __future__ import annotations

from typing import Mapping, Optional, Protocol

from .model import Location, Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def location_names(self, *, organization_id: int) -> Mapping[int, str]:
        """Location id -> display name for one organization."""

        raise NotImplementedError

    def get_location(self, *, organization_id: int, location_id: int) -> Optional[Location]:
        raise NotImplementedError
