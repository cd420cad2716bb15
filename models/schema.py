"""
Data models for civil date-times, instants, ranges and constraints.

An instant is a plain ``int``: milliseconds since 1970-01-01T00:00:00Z.
Civil values are wall-clock readings with no zone attached. Months are
1-based everywhere.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, FrozenSet, Optional
from dateutil import parser as date_parser
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from .enums import ValidationErrorKind
from .errors import InvalidCivilDateTime


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_DAY = 24 * 60 * MS_PER_MINUTE


def datetime_to_instant(dt: datetime) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are read as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = dt - EPOCH
    return delta.days * MS_PER_DAY + delta.seconds * MS_PER_SECOND + delta.microseconds // 1000


def instant_to_datetime(instant: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=instant)


def _check_field(name: str, value: Any, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCivilDateTime(f"{name} must be an integer, got {value!r}", field=name)
    if not low <= value <= high:
        raise InvalidCivilDateTime(f"{name} {value} out of range {low}..{high}", field=name)


def _check_date_fields(year: int, month: int, day: int) -> None:
    _check_field("year", year, 1, 9999)
    _check_field("month", month, 1, 12)
    _check_field("day", day, 1, calendar.monthrange(year, month)[1])


@dataclass(frozen=True, order=True)
class CivilDate:
    """A calendar day with no timezone."""
    year: int
    month: int
    day: int

    def __post_init__(self):
        _check_date_fields(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: date) -> "CivilDate":
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, text: str) -> "CivilDate":
        """Parse a ``YYYY-MM-DD`` string."""
        try:
            year, month, day = (int(part) for part in text.strip().split("-"))
        except (ValueError, AttributeError):
            raise InvalidCivilDateTime(f"Invalid civil date: {text!r}") from None
        return cls(year, month, day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True, order=True)
class CivilTimeOfDay:
    """A wall-clock time of day at minute precision."""
    hour: int
    minute: int = 0

    def __post_init__(self):
        _check_field("hour", self.hour, 0, 23)
        _check_field("minute", self.minute, 0, 59)

    @classmethod
    def parse(cls, text: str) -> "CivilTimeOfDay":
        """
        Parse an ``HH:mm`` string.

        A missing minute part defaults to 0 (``"9"`` is 09:00).
        """
        try:
            parts = text.strip().split(":")
            if len(parts) > 2:
                raise ValueError(text)
            hour = int(parts[0])
            minute = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        except (ValueError, AttributeError):
            raise InvalidCivilDateTime(f"Invalid time of day: {text!r}") from None
        return cls(hour, minute)

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True, order=True)
class CivilDateTime:
    """
    A wall-clock date and time with no timezone.

    Ordering is lexicographic over (year, month, day, hour, minute, second),
    which is the comparison the resolver's search relies on.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def __post_init__(self):
        _check_date_fields(self.year, self.month, self.day)
        _check_field("hour", self.hour, 0, 23)
        _check_field("minute", self.minute, 0, 59)
        _check_field("second", self.second, 0, 59)

    @classmethod
    def from_parts(
        cls,
        civil_date: CivilDate,
        time_of_day: CivilTimeOfDay,
        second: int = 0,
    ) -> "CivilDateTime":
        """Combine a calendar day and a time of day."""
        return cls(
            civil_date.year,
            civil_date.month,
            civil_date.day,
            time_of_day.hour,
            time_of_day.minute,
            second,
        )

    @classmethod
    def from_datetime(cls, dt: datetime) -> "CivilDateTime":
        """Take the wall-clock fields of ``dt``; any tzinfo is ignored."""
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_naive_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def naive_seconds(self) -> int:
        """Seconds since the epoch if this wall clock were read as UTC."""
        return calendar.timegm(
            (self.year, self.month, self.day, self.hour, self.minute, self.second)
        )

    def civil_date(self) -> CivilDate:
        return CivilDate(self.year, self.month, self.day)

    def time_of_day(self) -> CivilTimeOfDay:
        return CivilTimeOfDay(self.hour, self.minute)

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )


@dataclass(frozen=True)
class DateTimeRange:
    """
    A selected range of instants.

    Either end may be missing while the selection is in progress. Ordering
    of the two ends is checked by the validator, not here.
    """
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def duration_minutes(self) -> Optional[float]:
        if not self.is_complete:
            return None
        return (self.end - self.start) / MS_PER_MINUTE

    @classmethod
    def from_datetimes(
        cls,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> "DateTimeRange":
        return cls(
            start=datetime_to_instant(start) if start is not None else None,
            end=datetime_to_instant(end) if end is not None else None,
        )


@dataclass(frozen=True)
class ValidationError:
    """A violated range rule, returned (never raised) by the validator."""
    kind: ValidationErrorKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.kind.value, "message": self.message}


def coerce_instant(value: Any) -> Optional[int]:
    """
    Normalise an instant-like value to epoch milliseconds.

    Accepts an int, a datetime (naive means UTC), a date (midnight UTC), a
    CivilDate (midnight UTC) or an ISO-8601 string.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid instant: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        return datetime_to_instant(value)
    if isinstance(value, date):
        return datetime_to_instant(datetime(value.year, value.month, value.day))
    if isinstance(value, CivilDate):
        return datetime_to_instant(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid ISO-8601 instant: {value!r}") from None
        return datetime_to_instant(parsed)
    raise ValueError(f"Invalid instant: {value!r}")


def coerce_civil_date(value: Any) -> CivilDate:
    """Normalise a CivilDate, date, datetime (read in UTC), ``YYYY-MM-DD`` or field dict."""
    if isinstance(value, CivilDate):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return CivilDate.from_date(value)
    if isinstance(value, date):
        return CivilDate.from_date(value)
    if isinstance(value, str):
        return CivilDate.parse(value)
    if isinstance(value, dict):
        return CivilDate(**value)
    raise ValueError(f"Invalid civil date: {value!r}")


class ConstraintConfig(BaseModel):
    """Constraints a selected range must satisfy. Every rule is optional."""
    model_config = ConfigDict(frozen=True)

    min_instant: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("min_instant", "min_date", "minDate"),
        description="Earliest allowed start (epoch ms)",
    )
    max_instant: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("max_instant", "max_date", "maxDate"),
        description="Latest allowed end (epoch ms)",
    )
    min_time_of_day: Optional[CivilTimeOfDay] = Field(
        None,
        validation_alias=AliasChoices("min_time_of_day", "min_time", "minTime"),
        description="Earliest allowed start time of day",
    )
    max_time_of_day: Optional[CivilTimeOfDay] = Field(
        None,
        validation_alias=AliasChoices("max_time_of_day", "max_time", "maxTime"),
        description="Latest allowed end time of day",
    )
    blackout_dates: FrozenSet[CivilDate] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("blackout_dates", "blackoutDates"),
        description="Calendar days no range may touch",
    )
    min_duration_minutes: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("min_duration_minutes", "min_duration", "minDuration"),
        description="Minimum range length in minutes",
    )
    max_duration_minutes: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("max_duration_minutes", "max_duration", "maxDuration"),
        description="Maximum range length in minutes",
    )

    @field_validator("min_instant", "max_instant", mode="before")
    @classmethod
    def validate_instant(cls, v: Any) -> Optional[int]:
        """Accept datetimes, dates and ISO strings as well as epoch ms."""
        return coerce_instant(v)

    @field_validator("min_time_of_day", "max_time_of_day", mode="before")
    @classmethod
    def validate_time_of_day(cls, v: Any) -> Any:
        """Accept ``HH:mm`` strings."""
        if isinstance(v, str):
            return CivilTimeOfDay.parse(v)
        return v

    @field_validator("blackout_dates", mode="before")
    @classmethod
    def validate_blackout_dates(cls, v: Any) -> FrozenSet[CivilDate]:
        if v is None:
            return frozenset()
        if isinstance(v, (str, date, CivilDate)):
            v = [v]
        return frozenset(coerce_civil_date(item) for item in v)

    @model_validator(mode="after")
    def validate_durations(self) -> "ConstraintConfig":
        """Reject a minimum duration above the maximum."""
        if (
            self.min_duration_minutes is not None
            and self.max_duration_minutes is not None
            and self.min_duration_minutes > self.max_duration_minutes
        ):
            raise ValueError(
                f"min_duration_minutes ({self.min_duration_minutes}) exceeds "
                f"max_duration_minutes ({self.max_duration_minutes})"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConstraintConfig":
        """Create from dictionary (JSON import)."""
        return cls.model_validate(data)
