"""Time-zone arithmetic on absolute instants.

Every function takes the instant and the IANA zone explicitly; nothing here
depends on the process's local time zone. Naive datetimes are read as UTC.
"""

from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from ..core.exceptions import InvalidTimeFormat

_HH_MM = re.compile(r"\d{2}:\d{2}", re.ASCII)

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class TimeParts:
    year: int
    month: int
    day: int
    hour: int
    minute: int


def utc_now() -> datetime:
    """Current instant (UTC, aware).

    Note: Services receive this as their default clock so tests can inject one.
    """
    return datetime.now(timezone.utc)


def ensure_aware(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


@lru_cache(maxsize=64)
def _zone(time_zone: str) -> ZoneInfo:
    return ZoneInfo(time_zone)


def parse_time_to_minutes(value: str) -> int:
    """Parse an ``HH:mm`` wall-clock value into minutes since midnight."""
    text = str(value)
    if not _HH_MM.fullmatch(text):
        raise InvalidTimeFormat(f"Invalid time value: {value}")

    hour, minute = int(text[:2]), int(text[3:])
    if hour < 0 or hour > 23 or minute < 0 or minute > 59:
        raise InvalidTimeFormat(f"Invalid time value: {value}")
    return hour * 60 + minute


def time_parts_in_zone(instant: datetime, time_zone: str) -> TimeParts:
    local = ensure_aware(instant).astimezone(_zone(time_zone))
    return TimeParts(year=local.year, month=local.month, day=local.day, hour=local.hour, minute=local.minute)


def date_in_zone(instant: datetime, time_zone: str) -> str:
    p = time_parts_in_zone(instant, time_zone)
    return f"{p.year:04d}-{p.month:02d}-{p.day:02d}"


def previous_date_in_zone(instant: datetime, time_zone: str) -> str:
    """Calendar date 24 hours before ``instant``, observed in the same zone."""
    return date_in_zone(ensure_aware(instant) - timedelta(hours=24), time_zone)


def minutes_of_day_in_zone(instant: datetime, time_zone: str) -> int:
    p = time_parts_in_zone(instant, time_zone)
    return p.hour * 60 + p.minute


def compose_local_datetime(date_str: str, time_str: str) -> str:
    return f"{date_str}T{time_str}"


def local_minute_stamp(local_value: str) -> int:
    """Minutes on a civil time axis for a ``YYYY-MM-DDTHH:mm`` value.

    Wall-clock values from different days become comparable by subtraction;
    the axis carries no zone offset.
    """
    date_part, time_part = local_value.split("T")
    civil = datetime.strptime(f"{date_part} {time_part[:5]}", "%Y-%m-%d %H:%M")
    return int((civil - _EPOCH).total_seconds() // 60)


def local_minute_stamp_in_zone(instant: datetime, time_zone: str) -> int:
    p = time_parts_in_zone(instant, time_zone)
    civil = datetime(p.year, p.month, p.day, p.hour, p.minute)
    return int((civil - _EPOCH).total_seconds() // 60)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def add_days(date_str: str, days: int) -> str:
    return (parse_iso_date(date_str) + timedelta(days=days)).isoformat()


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """First and last local date of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return f"{year:04d}-{month:02d}-01", f"{year:04d}-{month:02d}-{last_day:02d}"


def to_iso_z(instant: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    utc = ensure_aware(instant).astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, rounded half up."""
    seconds = (ensure_aware(end) - ensure_aware(start)).total_seconds()
    return round_half_up(seconds / 60)


def round_half_up(value: float) -> int:
    # round() would round half to even; ties go towards +infinity here
    return math.floor(value + 0.5)
