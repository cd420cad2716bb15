"""
Timezone utilities for validation, formatting and DST checks.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union
import pytz
from dateutil import parser as date_parser
from models.enums import CivilTimeKind
from models.schema import CivilDateTime, datetime_to_instant
from .resolver import TimezoneResolver


@dataclass(frozen=True)
class TimezoneOption:
    """A zone offered in the picker's timezone selector."""
    timezone: str
    label: str


COMMON_TIMEZONES = [
    TimezoneOption("UTC", "UTC"),
    TimezoneOption("America/New_York", "Eastern Time (ET)"),
    TimezoneOption("America/Chicago", "Central Time (CT)"),
    TimezoneOption("America/Denver", "Mountain Time (MT)"),
    TimezoneOption("America/Los_Angeles", "Pacific Time (PT)"),
    TimezoneOption("Europe/London", "London (GMT)"),
    TimezoneOption("Europe/Paris", "Paris (CET)"),
    TimezoneOption("Asia/Tokyo", "Tokyo (JST)"),
    TimezoneOption("Asia/Shanghai", "Shanghai (CST)"),
    TimezoneOption("Australia/Sydney", "Sydney (AEDT)"),
]


def validate_iana_timezone(tz_str: str) -> bool:
    """
    Whether a zone id may be offered in the picker's selector.

    Only canonical Area/Location ids qualify; legacy aliases such as
    ``EST`` resolve in pytz but are not selectable.
    """
    return tz_str == "UTC" or tz_str in pytz.common_timezones_set


def get_common_timezones() -> List[TimezoneOption]:
    """Default zone list for the picker."""
    return list(COMMON_TIMEZONES)


def format_in_timezone(
    instant: int,
    tz_str: str,
    fmt: str = "datetime",
    resolver: Optional[TimezoneResolver] = None,
) -> str:
    """
    Format an instant as wall-clock text in a zone.

    Args:
        instant: Epoch milliseconds
        tz_str: IANA timezone identifier
        fmt: "date" (YYYY-MM-DD), "time" (HH:mm) or "datetime" (both)
        resolver: Resolver to use (default: pytz-backed)

    Returns:
        Formatted string
    """
    if fmt not in ("date", "time", "datetime"):
        raise ValueError(f"Unknown format: {fmt}")
    civil = (resolver or TimezoneResolver()).instant_to_civil(instant, tz_str)
    day = str(civil.civil_date())
    clock = str(civil.time_of_day())
    if fmt == "date":
        return day
    if fmt == "time":
        return clock
    return f"{day}, {clock}"


def parse_iso_instant(iso_str: str) -> Optional[int]:
    """
    Parse ISO-8601 datetime string with offset into an instant.

    Args:
        iso_str: ISO-8601 formatted datetime string

    Returns:
        Epoch milliseconds, or None if invalid
    """
    if not iso_str or "T" not in iso_str:
        # Reject date-only strings (they parse but aren't what we want)
        return None
    try:
        dt = date_parser.isoparse(iso_str.strip())
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        return None
    return datetime_to_instant(dt)


def check_dst_transition(
    civil: Union[CivilDateTime, datetime],
    tz_str: str,
    resolver: Optional[TimezoneResolver] = None,
) -> bool:
    """
    Check if a wall-clock time falls on a DST transition boundary.

    Args:
        civil: Wall-clock date-time (a naive datetime is accepted)
        tz_str: IANA timezone identifier

    Returns:
        True if the time is skipped or repeated, False otherwise
    """
    if isinstance(civil, datetime):
        civil = CivilDateTime.from_datetime(civil)
    kind = (resolver or TimezoneResolver()).classify(civil, tz_str)
    return kind != CivilTimeKind.NORMAL
