from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...shifts.model import ResolvedShiftSegment
from ...users.model import Team
from ..model import DutySession
from .base import AttendanceStrategy, LatenessDecision


class UnscheduledStrategy(AttendanceStrategy):
    """No schedule known: never late, no overtime."""

    def decide_punch_on(
        self,
        *,
        now: datetime,
        timezone: str,
        segment: Optional[ResolvedShiftSegment],
        team: Optional[Team],
        max_late_minutes: int,
    ) -> LatenessDecision:
        return LatenessDecision(is_late=False)

    def overtime_minutes(
        self,
        *,
        session: DutySession,
        punched_off_at: datetime,
        timezone: str,
        team: Optional[Team],
        max_overtime_minutes: int,
    ) -> int:
        return 0
