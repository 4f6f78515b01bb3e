from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...shifts.model import ResolvedShiftSegment
from ...users.model import Team
from ..model import DutySession


@dataclass(frozen=True)
class LatenessDecision:
    is_late: bool
    late_minutes: int = 0


class AttendanceStrategy(ABC):
    """Strategy Pattern: how lateness and overtime are measured for a session."""

    @abstractmethod
    def decide_punch_on(
        self,
        *,
        now: datetime,
        timezone: str,
        segment: Optional[ResolvedShiftSegment],
        team: Optional[Team],
        max_late_minutes: int,
    ) -> LatenessDecision:
        raise NotImplementedError

    @abstractmethod
    def overtime_minutes(
        self,
        *,
        session: DutySession,
        punched_off_at: datetime,
        timezone: str,
        team: Optional[Team],
        max_overtime_minutes: int,
    ) -> int:
        raise NotImplementedError
