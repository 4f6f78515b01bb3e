from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import date_in_zone, parse_iso_date, parse_time_to_minutes
from ..common.validators import require_admin, require_non_empty
from ..core import constants
from ..core.enums import AssignmentTargetType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Employee
from .model import ResolvedShiftSegment, ShiftAssignment, ShiftOverride, ShiftPreset, ShiftSegment
from .repository import ShiftRepository
from .resolution import resolve_active_segment, resolve_closest_segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewShiftSegment:
    segment_no: int
    start_time: str
    end_time: str
    crosses_midnight: Optional[bool] = None
    late_grace_minutes: Optional[int] = None


@dataclass(frozen=True)
class SegmentForPunch:
    preset: ShiftPreset
    segment: ResolvedShiftSegment
    timezone: str


class ShiftService:
    def __init__(
        self,
        shifts: ShiftRepository,
        *,
        app_timezone: str = constants.DEFAULT_TIMEZONE,
        default_late_grace_minutes: int = constants.DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._shifts = shifts
        self._app_timezone = app_timezone
        self._default_grace = int(default_late_grace_minutes)

    def create_preset(
        self,
        *,
        current_role: Role,
        name: str,
        segments: Sequence[NewShiftSegment],
        team_id: Optional[int] = None,
        timezone: Optional[str] = None,
        is_default: bool = False,
    ) -> ShiftPreset:
        require_admin(current_role)
        name = require_non_empty(name, "name")
        if not segments:
            raise ValidationError("A shift preset needs at least one segment")

        preset = self._shifts.create_preset(
            name=name,
            timezone=timezone or self._app_timezone,
            team_id=team_id,
            is_default=bool(is_default),
            segments=self._normalize_segments(segments),
        )
        logger.info("shift preset created id=%s name=%s segments=%d", preset.preset_id, preset.name, len(preset.segments))
        return preset

    def list_presets(self) -> Sequence[ShiftPreset]:
        return self._shifts.list_presets()

    def create_assignment(
        self,
        *,
        current_role: Role,
        target_type: AssignmentTargetType,
        target_id: int,
        preset_id: int,
        effective_from: str,
        effective_to: Optional[str] = None,
    ) -> ShiftAssignment:
        require_admin(current_role)
        self._require_preset(preset_id)

        start = parse_iso_date(effective_from)
        end = parse_iso_date(effective_to) if effective_to else None
        if end is not None and end < start:
            raise ValidationError("effective_to must be after or equal to effective_from")

        return self._shifts.replace_assignment(
            target_type=target_type,
            target_id=int(target_id),
            preset_id=int(preset_id),
            effective_from=start,
            effective_to=end,
        )

    def create_override(
        self,
        *,
        current_role: Role,
        target_type: AssignmentTargetType,
        target_id: int,
        preset_id: int,
        override_date: str,
        reason: Optional[str] = None,
    ) -> ShiftOverride:
        require_admin(current_role)
        self._require_preset(preset_id)

        return self._shifts.create_override(
            target_type=target_type,
            target_id=int(target_id),
            preset_id=int(preset_id),
            override_date=parse_iso_date(override_date),
            reason=reason.strip() if reason else None,
        )

    def resolve_preset_for_user(self, employee: Employee, now: datetime) -> Optional[ShiftPreset]:
        """Preset that applies to the employee on the local date of ``now``.

        Precedence: user override, team override, user assignment, team
        assignment, team default preset, global default preset.
        """

        local_date = parse_iso_date(date_in_zone(now, self._app_timezone))
        targets = [(AssignmentTargetType.USER, employee.user_id)]
        if employee.team_id:
            targets.append((AssignmentTargetType.TEAM, employee.team_id))

        for target_type, target_id in targets:
            override = self._shifts.find_override(target_type=target_type, target_id=target_id, on_date=local_date)
            if override:
                return self._shifts.get_preset(override.preset_id)

        for target_type, target_id in targets:
            assignment = self._shifts.find_assignment(target_type=target_type, target_id=target_id, on_date=local_date)
            if assignment:
                return self._shifts.get_preset(assignment.preset_id)

        if employee.team_id:
            team_default = self._shifts.get_default_preset(team_id=employee.team_id)
            if team_default:
                return team_default

        return self._shifts.get_default_preset(team_id=None)

    def get_segment_for_punch(self, employee: Employee, now: datetime) -> Optional[SegmentForPunch]:
        preset = self.resolve_preset_for_user(employee, now)
        if not preset:
            return None

        timezone = preset.timezone or self._app_timezone
        segment = resolve_active_segment(preset, now, timezone) or resolve_closest_segment(preset, now, timezone)
        if not segment:
            return None
        return SegmentForPunch(preset=preset, segment=segment, timezone=timezone)

    def get_active_segment_for_user(self, employee: Employee, now: datetime) -> SegmentForPunch:
        preset = self.resolve_preset_for_user(employee, now)
        if not preset:
            raise NotFoundError("No shift preset assigned for this user")

        timezone = preset.timezone or self._app_timezone
        segment = resolve_active_segment(preset, now, timezone)
        if not segment:
            raise NotFoundError("No active shift segment right now")
        return SegmentForPunch(preset=preset, segment=segment, timezone=timezone)

    def _require_preset(self, preset_id: int) -> ShiftPreset:
        preset = self._shifts.get_preset(int(preset_id))
        if not preset or not preset.is_active:
            raise NotFoundError("Shift preset not found")
        return preset

    def _normalize_segments(self, segments: Sequence[NewShiftSegment]) -> list[ShiftSegment]:
        seen: set[int] = set()
        normalized: list[ShiftSegment] = []

        for seg in sorted(segments, key=lambda s: s.segment_no):
            if seg.segment_no <= 0:
                raise ValidationError("segment_no must be greater than zero")
            if seg.segment_no in seen:
                raise ValidationError(f"Duplicate segment_no {seg.segment_no}")
            seen.add(seg.segment_no)

            start_minutes = parse_time_to_minutes(seg.start_time)
            end_minutes = parse_time_to_minutes(seg.end_time)
            grace = self._default_grace if seg.late_grace_minutes is None else int(seg.late_grace_minutes)
            if grace < 0:
                raise ValidationError("late_grace_minutes must be 0 or greater")

            crosses = seg.crosses_midnight if seg.crosses_midnight is not None else end_minutes <= start_minutes
            normalized.append(
                ShiftSegment(
                    segment_id=0,  # assigned by the repository
                    segment_no=int(seg.segment_no),
                    start_time=seg.start_time,
                    end_time=seg.end_time,
                    crosses_midnight=bool(crosses),
                    late_grace_minutes=grace,
                )
            )
        return normalized
