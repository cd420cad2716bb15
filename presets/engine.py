"""
Preset ranges offered next to the calendar.

Day boundaries are UTC. ``now`` is injectable so presets are reproducible.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from models.schema import MS_PER_MINUTE, DateTimeRange, datetime_to_instant, instant_to_datetime
from utils.dates import add_days, add_months, end_of_day, get_days_in_month, start_of_day


MS_PER_HOUR = 60 * MS_PER_MINUTE

QUARTERS = [
    ("Q1", 1, 3),
    ("Q2", 4, 6),
    ("Q3", 7, 9),
    ("Q4", 10, 12),
]


@dataclass(frozen=True)
class Preset:
    """A labelled range the user can pick with one click."""
    label: str
    range: DateTimeRange


def current_instant() -> int:
    return datetime_to_instant(datetime.now(timezone.utc))


def round_to_interval(instant: int, interval_minutes: int) -> int:
    """
    Round to the nearest multiple of ``interval_minutes`` past the hour.

    Seconds are dropped before rounding; halves round up.
    """
    if interval_minutes <= 0:
        raise ValueError(f"Rounding interval must be positive, got {interval_minutes}")
    hour_start = instant - instant % MS_PER_HOUR
    minutes = (instant % MS_PER_HOUR) // MS_PER_MINUTE
    rounded = (2 * minutes + interval_minutes) // (2 * interval_minutes) * interval_minutes
    return hour_start + rounded * MS_PER_MINUTE


def start_of_month(instant: int) -> int:
    dt = instant_to_datetime(instant)
    return datetime_to_instant(datetime(dt.year, dt.month, 1, tzinfo=timezone.utc))


def get_relative_presets(
    now: Optional[int] = None,
    rounding_interval_minutes: int = 15,
) -> List[Preset]:
    """
    Presets relative to ``now``.

    Hour-based presets end at ``now`` rounded to the interval; day-based
    presets cover whole days.
    """
    now = current_instant() if now is None else now
    rounded = round_to_interval(now, rounding_interval_minutes)
    month_start = start_of_month(now)

    def last_hours(hours: int) -> DateTimeRange:
        return DateTimeRange(start=rounded - hours * MS_PER_HOUR, end=rounded)

    def whole_days(first: int, last: int) -> DateTimeRange:
        return DateTimeRange(start=start_of_day(first), end=end_of_day(last))

    return [
        Preset("Last 1 hour", last_hours(1)),
        Preset("Last 4 hours", last_hours(4)),
        Preset("Last 24 hours", last_hours(24)),
        Preset("Today", whole_days(now, now)),
        Preset("Yesterday", whole_days(add_days(now, -1), add_days(now, -1))),
        Preset("Last 7 days", whole_days(add_days(now, -7), now)),
        Preset("Last 30 days", whole_days(add_days(now, -30), now)),
        Preset("This month", whole_days(month_start, now)),
        Preset("Last month", whole_days(add_months(month_start, -1), month_start - 1)),
    ]


def get_absolute_presets(now: Optional[int] = None) -> List[Preset]:
    """Calendar quarters of ``now``'s year."""
    now = current_instant() if now is None else now
    year = instant_to_datetime(now).year

    presets = []
    for label, first_month, last_month in QUARTERS:
        first = datetime(year, first_month, 1, tzinfo=timezone.utc)
        last = datetime(year, last_month, get_days_in_month(year, last_month), tzinfo=timezone.utc)
        presets.append(Preset(
            f"{label} {year}",
            DateTimeRange(
                start=datetime_to_instant(first),
                end=end_of_day(datetime_to_instant(last)),
            ),
        ))
    return presets
