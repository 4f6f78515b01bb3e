from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import local_minute_stamp, local_minute_stamp_in_zone, minutes_of_day_in_zone
from ..core.enums import AssignmentTargetType


@dataclass(frozen=True)
class ShiftSegment:
    """One contiguous scheduled window within a shift preset."""

    segment_id: int
    segment_no: int
    start_time: str  # HH:mm
    end_time: str  # HH:mm
    crosses_midnight: bool = False
    late_grace_minutes: int = 0


@dataclass(frozen=True)
class ShiftPreset:
    """Named, ordered collection of segments, optionally scoped to a team."""

    preset_id: int
    name: str
    segments: tuple[ShiftSegment, ...] = ()
    team_id: Optional[int] = None
    timezone: Optional[str] = None
    is_default: bool = False
    is_active: bool = True

    def ordered_segments(self) -> list[ShiftSegment]:
        return sorted(self.segments, key=lambda s: s.segment_no)


@dataclass(frozen=True)
class ShiftAssignment:
    assignment_id: int
    target_type: AssignmentTargetType
    target_id: int
    preset_id: int
    effective_from: date
    effective_to: Optional[date] = None
    is_active: bool = True

    def covers(self, day: date) -> bool:
        return self.effective_from <= day and (self.effective_to is None or self.effective_to >= day)


@dataclass(frozen=True)
class ShiftOverride:
    override_id: int
    target_type: AssignmentTargetType
    target_id: int
    preset_id: int
    override_date: date
    reason: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LatenessRule:
    """Lateness bound to a segment start and its grace period.

    Without ``schedule_start_local`` only the minute of day matters, so the
    calendar date of the evaluated instant is ignored. With it, the instant is
    compared against the scheduled start on the civil minute axis.
    """

    start_minutes: int
    late_grace_minutes: int
    schedule_start_local: Optional[str] = None

    def is_late(self, instant: datetime, time_zone: str) -> bool:
        if self.schedule_start_local:
            start_stamp = local_minute_stamp(self.schedule_start_local)
            return local_minute_stamp_in_zone(instant, time_zone) > start_stamp + self.late_grace_minutes
        return minutes_of_day_in_zone(instant, time_zone) > self.start_minutes + self.late_grace_minutes


@dataclass(frozen=True)
class ResolvedShiftSegment:
    """The segment active for an instant, with its concrete schedule."""

    preset_id: int
    preset_name: str
    segment_id: int
    segment_no: int
    shift_date: str  # YYYY-MM-DD anchor date
    start_time: str
    end_time: str
    crosses_midnight: bool
    late_grace_minutes: int
    schedule_start_local: str  # YYYY-MM-DDTHH:mm
    schedule_end_local: str  # YYYY-MM-DDTHH:mm
    lateness: LatenessRule = field(repr=False)

    def is_late_at(self, instant: datetime, time_zone: str) -> bool:
        return self.lateness.is_late(instant, time_zone)
