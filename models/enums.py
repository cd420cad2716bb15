"""
Enumerations for date-time range models.
"""

from enum import Enum


class ValidationErrorKind(str, Enum):
    """Rule violated by a date-time range."""
    MIN_DATE = "min_date"
    MAX_DATE = "max_date"
    MIN_TIME = "min_time"
    MAX_TIME = "max_time"
    BLACKOUT = "blackout"
    MIN_DURATION = "min_duration"
    MAX_DURATION = "max_duration"
    INVALID_RANGE = "invalid_range"


class AmbiguityPolicy(str, Enum):
    """Which instant to pick when a wall-clock time occurs twice."""
    EARLIER = "EARLIER"
    LATER = "LATER"


class CivilTimeKind(str, Enum):
    """How a wall-clock time maps onto instants in a zone."""
    NORMAL = "NORMAL"
    GAP = "GAP"
    OVERLAP = "OVERLAP"
