"""
Timezones package initialization.
"""

from .oracle import OffsetOracle, PytzOffsetOracle, FixedOffsetOracle
from .resolver import TimezoneResolver
from .timezone_utils import (
    TimezoneOption,
    validate_iana_timezone,
    get_common_timezones,
    format_in_timezone,
    parse_iso_instant,
    check_dst_transition,
)

__all__ = [
    "OffsetOracle",
    "PytzOffsetOracle",
    "FixedOffsetOracle",
    "TimezoneResolver",
    "TimezoneOption",
    "validate_iana_timezone",
    "get_common_timezones",
    "format_in_timezone",
    "parse_iso_instant",
    "check_dst_transition",
]
