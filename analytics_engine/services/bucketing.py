"""Cutoff and bucket-label computation for daily, weekly and monthly counts.

Cutoffs are epoch milliseconds so they compare directly with ``createdAt``.
Labels are calendar aligned in the server's local zone unless a ``tzinfo``
is passed explicitly.

Weeks start on Sunday. A weekly label is the date of the Sunday on or before
the event.
"""
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional

DEFAULT_LOOKBACK_DAYS = 7

WEEK_START = calendar.SUNDAY

DAILY_FORMAT = "%Y-%m-%d"
MONTHLY_FORMAT = "%Y-%m"


@dataclass(frozen=True)
class Cutoffs:
    daily: int
    weekly: int
    monthly: int


@dataclass(frozen=True)
class BucketKeys:
    daily: str
    weekly: str
    monthly: str


def parse_lookback(raw: Any) -> int:
    """Positive integer lookback, or the default for anything else"""
    if isinstance(raw, bool):
        return DEFAULT_LOOKBACK_DAYS
    try:
        value = int(str(raw).strip()) if raw is not None else 0
    except ValueError:
        return DEFAULT_LOOKBACK_DAYS
    return value if value > 0 else DEFAULT_LOOKBACK_DAYS


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Move back a number of calendar months keeping day-of-month and wall time.

    A day missing from the target month rolls over into the next one, so
    31 March minus one month lands on 3 March (2 March in leap years).
    """
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    first_of_month = moment.replace(year=year, month=month + 1, day=1)
    return first_of_month + timedelta(days=moment.day - 1)


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _cutoff_ms(now: datetime, shift) -> int:
    try:
        return max(_epoch_ms(shift(now)), 0)
    except (OverflowError, ValueError, OSError):
        # Lookback reaches past the representable calendar
        return 0


def compute_cutoffs(now: datetime, lookback_days: int) -> Cutoffs:
    return Cutoffs(
        daily=_cutoff_ms(now, lambda m: m - timedelta(days=lookback_days)),
        weekly=_cutoff_ms(now, lambda m: m - timedelta(days=7 * lookback_days)),
        monthly=_cutoff_ms(now, lambda m: subtract_months(m, lookback_days)),
    )


def week_start(moment: datetime) -> datetime:
    offset = (moment.weekday() - WEEK_START) % 7
    return moment - timedelta(days=offset)


def bucket_keys(created_at: int, tz: Optional[tzinfo] = None) -> BucketKeys:
    moment = datetime.fromtimestamp(created_at / 1000, tz)
    return BucketKeys(
        daily=moment.strftime(DAILY_FORMAT),
        weekly=week_start(moment).strftime(DAILY_FORMAT),
        monthly=moment.strftime(MONTHLY_FORMAT),
    )
