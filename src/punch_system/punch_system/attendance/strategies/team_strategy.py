from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import date_in_zone, minutes_of_day_in_zone, parse_iso_date, parse_time_to_minutes
from ...shifts.model import ResolvedShiftSegment
from ...users.model import Team
from ..model import DutySession
from .base import AttendanceStrategy, LatenessDecision


class TeamWindowStrategy(AttendanceStrategy):
    """Fallback when no preset applies: the team's own working window.

    No grace period; a punch after the team start minute is late.
    """

    def decide_punch_on(
        self,
        *,
        now: datetime,
        timezone: str,
        segment: Optional[ResolvedShiftSegment],
        team: Optional[Team],
        max_late_minutes: int,
    ) -> LatenessDecision:
        if team is None or not team.shift_start_time:
            return LatenessDecision(is_late=False)

        start = parse_time_to_minutes(team.shift_start_time)
        punch = minutes_of_day_in_zone(now, timezone)
        if punch <= start:
            return LatenessDecision(is_late=False)
        return LatenessDecision(is_late=True, late_minutes=min(max_late_minutes, punch - start))

    def overtime_minutes(
        self,
        *,
        session: DutySession,
        punched_off_at: datetime,
        timezone: str,
        team: Optional[Team],
        max_overtime_minutes: int,
    ) -> int:
        if team is None or not team.shift_start_time or not team.shift_end_time:
            return 0

        start = parse_time_to_minutes(team.shift_start_time)
        end = parse_time_to_minutes(team.shift_end_time)
        scheduled_end = end if end > start else end + 1440

        on_minutes = minutes_of_day_in_zone(session.punched_on_at, timezone)
        day_delta = self._local_day_delta(session.punched_on_at, punched_off_at, timezone)
        off_minutes = max(on_minutes, day_delta * 1440 + minutes_of_day_in_zone(punched_off_at, timezone))

        early = max(0, start - on_minutes)
        late = max(0, off_minutes - scheduled_end)
        return min(max_overtime_minutes, early + late)

    @staticmethod
    def _local_day_delta(start: datetime, end: datetime, timezone: str) -> int:
        start_day = parse_iso_date(date_in_zone(start, timezone))
        end_day = parse_iso_date(date_in_zone(end, timezone))
        return max(0, (end_day - start_day).days)
