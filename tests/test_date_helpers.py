from datetime import date, datetime, timezone

from utils.date_helpers import (
    add_months,
    format_timestamp,
    friendly_date,
    month_bounds,
    parse_date,
    parse_timestamp,
    timestamp_sort_key,
    weekday_name,
)


def test_parse_date_accepts_common_separators():
    assert parse_date("2024-01-05") == date(2024, 1, 5)
    assert parse_date("2024/1/5") == date(2024, 1, 5)
    assert parse_date("2024.01.05") == date(2024, 1, 5)
    assert parse_date("05/01/2024") is None
    assert parse_date("") is None


def test_month_bounds_leap_year():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2023, 2, 1))[1] == date(2023, 2, 28)


def test_add_months_clamps_and_wraps():
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 15), -2) == date(2023, 11, 15)
    assert add_months(date(2024, 12, 1), 1) == date(2025, 1, 1)


def test_weekday_and_friendly_date():
    ref = date(2024, 1, 16)
    assert weekday_name(date(2024, 1, 14)) == "星期日"
    assert friendly_date("2024-01-16", ref) == "今天"
    assert friendly_date("2024-01-15", ref) == "昨天"
    assert friendly_date("2024-01-14", ref) == "1月14日 星期日"
    assert friendly_date("garbage", ref) == "garbage"


def test_timestamp_round_trip():
    dt = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    text = format_timestamp(dt)

    assert text == "2024-01-15T12:00:00.000Z"
    assert parse_timestamp(text) == dt
    assert parse_timestamp("2024/01/15 12:30") == datetime(2024, 1, 15, 12, 30)
    assert parse_timestamp("not a time") is None


def test_timestamp_sort_key_puts_garbage_first():
    assert timestamp_sort_key("bad") < timestamp_sort_key("2000-01-01T00:00:00.000Z")
