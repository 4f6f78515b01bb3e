from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import (
    add_days,
    compose_local_datetime,
    date_in_zone,
    minutes_of_day_in_zone,
    parse_time_to_minutes,
    previous_date_in_zone,
)
from .model import LatenessRule, ResolvedShiftSegment, ShiftPreset, ShiftSegment


def resolve_active_segment(preset: ShiftPreset, now: datetime, time_zone: str) -> Optional[ResolvedShiftSegment]:
    """Find the segment of ``preset`` that is on duty at ``now``.

    Segments are evaluated by ascending ``segment_no`` and the first match
    wins. A segment crossing midnight is anchored on yesterday while ``now``
    is in its early-morning tail. Returns None when no segment is active,
    which is a normal outcome for presets with gaps.
    """

    now_minutes = minutes_of_day_in_zone(now, time_zone)
    today = date_in_zone(now, time_zone)
    yesterday = previous_date_in_zone(now, time_zone)

    for segment in preset.ordered_segments():
        start_minutes = parse_time_to_minutes(segment.start_time)
        end_minutes = parse_time_to_minutes(segment.end_time)

        if not segment.crosses_midnight:
            # start == end is a zero-width window and never matches
            active = start_minutes <= now_minutes < end_minutes
            shift_date = today
        else:
            active = now_minutes >= start_minutes or now_minutes < end_minutes
            shift_date = yesterday if now_minutes < end_minutes else today

        if not active:
            continue

        end_date = today if segment.crosses_midnight and end_minutes <= start_minutes else shift_date
        return _resolved(
            preset,
            segment,
            shift_date=shift_date,
            crosses_midnight=segment.crosses_midnight,
            schedule_start_local=compose_local_datetime(shift_date, segment.start_time),
            schedule_end_local=compose_local_datetime(end_date, segment.end_time),
            lateness=LatenessRule(start_minutes=start_minutes, late_grace_minutes=segment.late_grace_minutes),
        )

    return None


def resolve_closest_segment(preset: ShiftPreset, now: datetime, time_zone: str) -> Optional[ResolvedShiftSegment]:
    """Pick the segment whose start is nearest to ``now`` (ties: lower number).

    Used at punch time when nothing is active, e.g. an early arrival. The
    segment is anchored on today and lateness is measured against its
    scheduled start timestamp.
    """

    ordered = preset.ordered_segments()
    if not ordered:
        return None

    now_minutes = minutes_of_day_in_zone(now, time_zone)
    today = date_in_zone(now, time_zone)

    # ordered by segment_no, so min() keeps the lower number on ties
    segment = min(ordered, key=lambda s: abs(parse_time_to_minutes(s.start_time) - now_minutes))

    start_minutes = parse_time_to_minutes(segment.start_time)
    end_minutes = parse_time_to_minutes(segment.end_time)
    crosses_midnight = segment.crosses_midnight or end_minutes <= start_minutes
    end_date = add_days(today, 1) if crosses_midnight and end_minutes <= start_minutes else today
    schedule_start_local = compose_local_datetime(today, segment.start_time)

    return _resolved(
        preset,
        segment,
        shift_date=today,
        crosses_midnight=crosses_midnight,
        schedule_start_local=schedule_start_local,
        schedule_end_local=compose_local_datetime(end_date, segment.end_time),
        lateness=LatenessRule(
            start_minutes=start_minutes,
            late_grace_minutes=segment.late_grace_minutes,
            schedule_start_local=schedule_start_local,
        ),
    )


def _resolved(
    preset: ShiftPreset,
    segment: ShiftSegment,
    *,
    shift_date: str,
    crosses_midnight: bool,
    schedule_start_local: str,
    schedule_end_local: str,
    lateness: LatenessRule,
) -> ResolvedShiftSegment:
    return ResolvedShiftSegment(
        preset_id=preset.preset_id,
        preset_name=preset.name,
        segment_id=segment.segment_id,
        segment_no=segment.segment_no,
        shift_date=shift_date,
        start_time=segment.start_time,
        end_time=segment.end_time,
        crosses_midnight=crosses_midnight,
        late_grace_minutes=segment.late_grace_minutes,
        schedule_start_local=schedule_start_local,
        schedule_end_local=schedule_end_local,
        lateness=lateness,
    )
