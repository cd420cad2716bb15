"""
Models package initialization.
"""

from .enums import ValidationErrorKind, AmbiguityPolicy, CivilTimeKind
from .errors import RangePickerError, UnknownTimezone, InvalidCivilDateTime
from .schema import (
    CivilDate,
    CivilTimeOfDay,
    CivilDateTime,
    DateTimeRange,
    ValidationError,
    ConstraintConfig,
    datetime_to_instant,
    instant_to_datetime,
    coerce_instant,
    coerce_civil_date,
)

__all__ = [
    "ValidationErrorKind",
    "AmbiguityPolicy",
    "CivilTimeKind",
    "RangePickerError",
    "UnknownTimezone",
    "InvalidCivilDateTime",
    "CivilDate",
    "CivilTimeOfDay",
    "CivilDateTime",
    "DateTimeRange",
    "ValidationError",
    "ConstraintConfig",
    "datetime_to_instant",
    "instant_to_datetime",
    "coerce_instant",
    "coerce_civil_date",
]
