from datetime import datetime, timezone

import pytest

from analytics_engine.services.bucketing import (
    DEFAULT_LOOKBACK_DAYS,
    bucket_keys,
    compute_cutoffs,
    parse_lookback,
    subtract_months,
)

UTC = timezone.utc


def _ms(*args) -> int:
    return int(datetime(*args, tzinfo=UTC).timestamp() * 1000)


@pytest.mark.parametrize("raw, expected", [
    (None, DEFAULT_LOOKBACK_DAYS),
    ("", DEFAULT_LOOKBACK_DAYS),
    ("abc", DEFAULT_LOOKBACK_DAYS),
    ("2.5", DEFAULT_LOOKBACK_DAYS),
    ("0", DEFAULT_LOOKBACK_DAYS),
    ("-3", DEFAULT_LOOKBACK_DAYS),
    (True, DEFAULT_LOOKBACK_DAYS),
    ("14", 14),
    (3, 3),
])
def test_parse_lookback_falls_back_to_default(raw, expected):
    assert parse_lookback(raw) == expected


def test_subtract_months_keeps_day_and_time():
    moment = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
    assert subtract_months(moment, 2) == datetime(2023, 11, 15, 9, 30, tzinfo=UTC)
    assert subtract_months(moment, 13) == datetime(2022, 12, 15, 9, 30, tzinfo=UTC)


def test_subtract_months_rolls_missing_day_forward():
    assert subtract_months(datetime(2023, 3, 31), 1) == datetime(2023, 3, 3)
    assert subtract_months(datetime(2024, 3, 31), 1) == datetime(2024, 3, 2)


def test_compute_cutoffs_uses_days_weeks_and_months():
    now = datetime(2024, 3, 31, 12, tzinfo=UTC)
    cutoffs = compute_cutoffs(now, 1)

    assert cutoffs.daily == _ms(2024, 3, 30, 12)
    assert cutoffs.weekly == _ms(2024, 3, 24, 12)
    assert cutoffs.monthly == _ms(2024, 3, 2, 12)


@pytest.mark.parametrize("lookback", [1, 2, 7, 30, 90, 365])
def test_cutoffs_are_ordered(lookback):
    now = datetime(2024, 8, 31, 23, 59, tzinfo=UTC)
    now_ms = int(now.timestamp() * 1000)
    cutoffs = compute_cutoffs(now, lookback)

    assert cutoffs.monthly <= cutoffs.weekly <= cutoffs.daily <= now_ms


def test_lookback_beyond_calendar_includes_everything():
    cutoffs = compute_cutoffs(datetime(2024, 1, 1, tzinfo=UTC), 10 ** 9)

    assert cutoffs.daily == cutoffs.weekly == cutoffs.monthly == 0


def test_bucket_keys_midweek():
    # Wednesday
    keys = bucket_keys(_ms(2024, 3, 6, 15), UTC)

    assert keys.daily == "2024-03-06"
    assert keys.weekly == "2024-03-03"
    assert keys.monthly == "2024-03"


def test_week_starts_on_sunday():
    assert bucket_keys(_ms(2024, 3, 3, 0, 0), UTC).weekly == "2024-03-03"
    assert bucket_keys(_ms(2024, 3, 9, 23, 59), UTC).weekly == "2024-03-03"
    assert bucket_keys(_ms(2024, 3, 10, 0, 0), UTC).weekly == "2024-03-10"


def test_week_label_can_fall_in_previous_month():
    keys = bucket_keys(_ms(2024, 3, 1, 8), UTC)

    assert keys.weekly == "2024-02-25"
    assert keys.monthly == "2024-03"
