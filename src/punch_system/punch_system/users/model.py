from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: a user who punches in and out.

    Plain data object; accounts and credentials live outside this package.
    """

    user_id: int
    display_name: str
    username: str
    role: Role = Role.EMPLOYEE
    team_id: Optional[int] = None
    is_active: bool = True
    is_driver: bool = False


@dataclass(frozen=True)
class Team:
    """Team with an optional fallback working window (HH:mm)."""

    team_id: int
    name: str
    shift_start_time: Optional[str] = None
    shift_end_time: Optional[str] = None
