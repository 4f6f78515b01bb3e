from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BreakSessionStatus


@dataclass(frozen=True)
class BreakPolicy:
    """A kind of break (e.g. "lunch") with its expected length and daily cap."""

    policy_id: int
    code: str
    name: str
    expected_duration_minutes: int
    daily_limit: int
    is_active: bool = True


@dataclass(frozen=True)
class BreakSession:
    break_id: int
    user_id: int
    duty_session_id: int
    policy_id: int
    policy_code: str
    local_date: str
    started_at: datetime
    expected_duration_minutes: int
    status: BreakSessionStatus
    ended_at: Optional[datetime] = None
    actual_minutes: Optional[int] = None
    is_overtime: bool = False
    auto_closed: bool = False
    cancelled_at: Optional[datetime] = None
