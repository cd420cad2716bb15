"""
Date helpers on the UTC axis.

All functions take and return instants (epoch milliseconds).
"""

import calendar
from typing import List
from dateutil.relativedelta import relativedelta
from models.schema import (
    MS_PER_DAY,
    CivilDate,
    CivilTimeOfDay,
    datetime_to_instant,
    instant_to_datetime,
)


DAYS_OF_WEEK = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def start_of_day(instant: int) -> int:
    """Midnight UTC of the instant's day."""
    return instant - instant % MS_PER_DAY


def end_of_day(instant: int) -> int:
    """Last millisecond (23:59:59.999 UTC) of the instant's day."""
    return start_of_day(instant) + MS_PER_DAY - 1


def is_same_day(first: int, second: int) -> bool:
    return first // MS_PER_DAY == second // MS_PER_DAY


def is_date_between(instant: int, start: int, end: int) -> bool:
    """Check ``start <= instant <= end``."""
    return start <= instant <= end


def add_days(instant: int, days: int) -> int:
    return instant + days * MS_PER_DAY


def add_months(instant: int, months: int) -> int:
    """
    Shift by calendar months.

    Day of month is clamped, so Jan 31 + 1 month is Feb 28/29.
    """
    shifted = instant_to_datetime(instant) + relativedelta(months=months)
    return datetime_to_instant(shifted)


def get_days_in_month(year: int, month: int) -> int:
    """Number of days in a month (1-based month)."""
    return calendar.monthrange(year, month)[1]


def civil_date_of(instant: int) -> CivilDate:
    """Calendar day of an instant, read in UTC."""
    return CivilDate.from_date(instant_to_datetime(instant).date())


def instant_of_civil_date(civil_date: CivilDate) -> int:
    """Midnight UTC of a calendar day."""
    days = civil_date.to_date().toordinal() - CivilDate(1970, 1, 1).to_date().toordinal()
    return days * MS_PER_DAY


def parse_time(time_string: str) -> CivilTimeOfDay:
    """Parse ``HH:mm`` into a time of day."""
    return CivilTimeOfDay.parse(time_string)


def format_time(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def get_days_of_week() -> List[str]:
    """Weekday abbreviations, Sunday first."""
    return list(DAYS_OF_WEEK)


def get_month_names() -> List[str]:
    return list(MONTH_NAMES)
