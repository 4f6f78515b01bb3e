from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import local_minute_stamp, local_minute_stamp_in_zone
from ...shifts.model import ResolvedShiftSegment
from ...users.model import Team
from ..model import DutySession
from .base import AttendanceStrategy, LatenessDecision


class ScheduledSegmentStrategy(AttendanceStrategy):
    """Measure against the resolved segment's scheduled window."""

    def decide_punch_on(
        self,
        *,
        now: datetime,
        timezone: str,
        segment: Optional[ResolvedShiftSegment],
        team: Optional[Team],
        max_late_minutes: int,
    ) -> LatenessDecision:
        if segment is None:
            return LatenessDecision(is_late=False)

        raw = (
            local_minute_stamp_in_zone(now, timezone)
            - local_minute_stamp(segment.schedule_start_local)
            - segment.late_grace_minutes
        )
        late_minutes = min(max_late_minutes, max(0, raw))
        return LatenessDecision(is_late=late_minutes > 0, late_minutes=late_minutes)

    def overtime_minutes(
        self,
        *,
        session: DutySession,
        punched_off_at: datetime,
        timezone: str,
        team: Optional[Team],
        max_overtime_minutes: int,
    ) -> int:
        if not session.scheduled_start_local or not session.scheduled_end_local:
            return 0

        on_stamp = local_minute_stamp_in_zone(session.punched_on_at, timezone)
        off_stamp = max(local_minute_stamp_in_zone(punched_off_at, timezone), on_stamp)
        early = max(0, local_minute_stamp(session.scheduled_start_local) - on_stamp)
        late = max(0, off_stamp - local_minute_stamp(session.scheduled_end_local))
        return min(max_overtime_minutes, early + late)
