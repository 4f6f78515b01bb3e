from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..shifts.model import ResolvedShiftSegment
from ..users.model import Team
from .model import DutySession
from .strategies.base import AttendanceStrategy
from .strategies.scheduled_strategy import ScheduledSegmentStrategy
from .strategies.team_strategy import TeamWindowStrategy
from .strategies.unscheduled_strategy import UnscheduledStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy from what schedule is known."""

    def for_punch_on(self, *, segment: Optional[ResolvedShiftSegment], team: Optional[Team]) -> AttendanceStrategy:
        if segment is not None:
            return ScheduledSegmentStrategy()
        if team is not None and team.shift_start_time:
            return TeamWindowStrategy()
        return UnscheduledStrategy()

    def for_punch_off(self, *, session: DutySession, team: Optional[Team]) -> AttendanceStrategy:
        if session.scheduled_start_local and session.scheduled_end_local:
            return ScheduledSegmentStrategy()
        if team is not None and team.shift_start_time and team.shift_end_time:
            return TeamWindowStrategy()
        return UnscheduledStrategy()
