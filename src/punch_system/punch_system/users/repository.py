from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, Team


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active_employees(self, *, team_id: Optional[int] = None) -> Sequence[Employee]:
        """Active users with the EMPLOYEE role, ordered by display name."""

        raise NotImplementedError


class TeamRepository(Protocol):
    def get_by_id(self, team_id: int) -> Optional[Team]:
        raise NotImplementedError
