from datetime import datetime, timezone

import pytest

from src.punch_system.punch_system.common.datetime_utils import (
    add_days,
    compose_local_datetime,
    date_in_zone,
    local_minute_stamp,
    local_minute_stamp_in_zone,
    minutes_between,
    minutes_of_day_in_zone,
    month_bounds,
    parse_time_to_minutes,
    previous_date_in_zone,
    to_iso_z,
)
from src.punch_system.punch_system.core.exceptions import InvalidTimeFormat, ValidationError

DUBAI = "Asia/Dubai"


def test_parse_time_to_minutes_accepts_valid_values():
    assert parse_time_to_minutes("00:00") == 0
    assert parse_time_to_minutes("09:15") == 555
    assert parse_time_to_minutes("23:59") == 1439


@pytest.mark.parametrize(
    "value",
    ["24:00", "12:60", "9", "09:15:00", "ab:cd", "", "-1:30", "09 :15", " 9:15", "９:１５", "9:5", "09:15\n"],
)
def test_parse_time_to_minutes_rejects_bad_values(value):
    with pytest.raises(InvalidTimeFormat):
        parse_time_to_minutes(value)


def test_invalid_time_format_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_time_to_minutes("25:00")


def test_date_in_zone_uses_the_zone_not_utc():
    # 21:30 UTC is already the next day in Dubai (UTC+4)
    instant = datetime(2025, 3, 1, 21, 30, tzinfo=timezone.utc)

    assert date_in_zone(instant, DUBAI) == "2025-03-02"
    assert date_in_zone(instant, "UTC") == "2025-03-01"


def test_previous_date_in_zone_is_one_day_earlier():
    instant = datetime(2025, 3, 1, 21, 30, tzinfo=timezone.utc)

    assert previous_date_in_zone(instant, DUBAI) == "2025-03-01"


def test_previous_date_crosses_month_and_year():
    instant = datetime(2025, 1, 1, 6, 0, tzinfo=timezone.utc)

    assert previous_date_in_zone(instant, DUBAI) == "2024-12-31"


def test_minutes_of_day_in_zone():
    instant = datetime(2025, 3, 1, 5, 15, tzinfo=timezone.utc)

    assert minutes_of_day_in_zone(instant, DUBAI) == 9 * 60 + 15
    assert minutes_of_day_in_zone(instant, "UTC") == 5 * 60 + 15


def test_naive_datetimes_are_read_as_utc():
    assert minutes_of_day_in_zone(datetime(2025, 3, 1, 5, 15), DUBAI) == 555


def test_compose_local_datetime_is_plain_concatenation():
    assert compose_local_datetime("2025-03-01", "22:00") == "2025-03-01T22:00"


def test_local_minute_stamp_compares_across_days():
    evening = local_minute_stamp("2025-03-01T22:00")
    morning = local_minute_stamp("2025-03-02T03:00")

    assert morning - evening == 5 * 60


def test_local_minute_stamp_in_zone_matches_wall_clock():
    instant = datetime(2025, 3, 1, 18, 0, tzinfo=timezone.utc)

    assert local_minute_stamp_in_zone(instant, DUBAI) == local_minute_stamp("2025-03-01T22:00")


def test_month_bounds_handles_leap_february():
    assert month_bounds(2024, 2) == ("2024-02-01", "2024-02-29")
    assert month_bounds(2025, 12) == ("2025-12-01", "2025-12-31")


def test_add_days_rolls_over_month():
    assert add_days("2025-01-31", 1) == "2025-02-01"


def test_minutes_between_rounds_half_up():
    start = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)

    assert minutes_between(start, datetime(2025, 3, 1, 8, 0, 30, tzinfo=timezone.utc)) == 1
    assert minutes_between(start, datetime(2025, 3, 1, 8, 0, 29, tzinfo=timezone.utc)) == 0
    assert minutes_between(start, datetime(2025, 3, 1, 16, 0, tzinfo=timezone.utc)) == 480


def test_to_iso_z_has_millisecond_precision():
    instant = datetime(2025, 3, 1, 8, 0, 5, 123456, tzinfo=timezone.utc)

    assert to_iso_z(instant) == "2025-03-01T08:00:05.123Z"
