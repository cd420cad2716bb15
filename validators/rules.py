"""
Validation rules for selected date-time ranges.

Rules are evaluated in a fixed order, and ``validate`` reports only the
first one that fails:

1. min date, 2. max date, 3. blackout days, 4. start before end,
5. min duration, 6. max duration, 7. min time of day, 8. max time of day.

Calendar days and times of day are read on the UTC axis. The caller keeps
the range and the blackout set in the same frame.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Union
from models.enums import ValidationErrorKind
from models.schema import (
    MS_PER_DAY,
    MS_PER_MINUTE,
    CivilDate,
    ConstraintConfig,
    DateTimeRange,
    ValidationError,
    coerce_instant,
)
from utils.dates import civil_date_of, start_of_day


@dataclass
class ValidationResult:
    """Every rule a range violates, in precedence order."""
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if validation passed."""
        return len(self.errors) == 0

    @property
    def first(self) -> Optional[ValidationError]:
        """The violation ``validate`` would report."""
        return self.errors[0] if self.errors else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage/display."""
        return {
            "is_valid": self.is_valid,
            "error_count": len(self.errors),
            "errors": [e.to_dict() for e in self.errors],
        }


def _format_day(instant: int) -> str:
    return str(civil_date_of(instant))


def _minutes_of_day(instant: int) -> int:
    return (instant % MS_PER_DAY) // MS_PER_MINUTE


class RangeValidator:
    """
    Stateless validator for date-time ranges.

    Holds no state; one instance may be shared between threads.
    """

    def validate(
        self,
        date_range: DateTimeRange,
        constraints: ConstraintConfig,
    ) -> Optional[ValidationError]:
        """
        Validate a range, stopping at the first violated rule.

        Args:
            date_range: Selected range; a partial range is never invalid
            constraints: Rules to enforce

        Returns:
            The first ValidationError in rule order, or None
        """
        if not date_range.is_complete:
            return None
        for rule in self._rules():
            error = rule(date_range.start, date_range.end, constraints)
            if error is not None:
                return error
        return None

    def collect(
        self,
        date_range: DateTimeRange,
        constraints: ConstraintConfig,
    ) -> ValidationResult:
        """
        Validate a range, reporting every violated rule.

        Duration rules are skipped for an inverted range.
        """
        result = ValidationResult()
        if not date_range.is_complete:
            return result
        inverted = False
        for rule in self._rules():
            if inverted and rule in (self._check_min_duration, self._check_max_duration):
                continue
            error = rule(date_range.start, date_range.end, constraints)
            if error is None:
                continue
            if error.kind == ValidationErrorKind.INVALID_RANGE:
                inverted = True
            result.errors.append(error)
        return result

    def is_date_disabled(
        self,
        value: Union[int, datetime, date, CivilDate],
        constraints: ConstraintConfig,
    ) -> bool:
        """
        Check whether a single calendar cell should be disabled.

        Only date bounds and blackout days apply; duration and time-of-day
        are range rules.

        Args:
            value: Instant, datetime, date or CivilDate (dates are midnight UTC)
            constraints: Rules to enforce

        Returns:
            True if the date cannot be selected
        """
        instant = coerce_instant(value)
        if constraints.min_instant is not None and instant < constraints.min_instant:
            return True
        if constraints.max_instant is not None and instant > constraints.max_instant:
            return True
        return civil_date_of(instant) in constraints.blackout_dates

    def _rules(self) -> List[Callable[[int, int, ConstraintConfig], Optional[ValidationError]]]:
        return [
            self._check_min_date,
            self._check_max_date,
            self._check_blackout,
            self._check_order,
            self._check_min_duration,
            self._check_max_duration,
            self._check_min_time,
            self._check_max_time,
        ]

    def _check_min_date(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        if constraints.min_instant is not None and start < constraints.min_instant:
            return ValidationError(
                kind=ValidationErrorKind.MIN_DATE,
                message=f"Start date must be after {_format_day(constraints.min_instant)}",
            )
        return None

    def _check_max_date(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        if constraints.max_instant is not None and end > constraints.max_instant:
            return ValidationError(
                kind=ValidationErrorKind.MAX_DATE,
                message=f"End date must be before {_format_day(constraints.max_instant)}",
            )
        return None

    def _check_blackout(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        blackout = constraints.blackout_dates
        if not blackout:
            return None

        if civil_date_of(start) in blackout:
            return ValidationError(ValidationErrorKind.BLACKOUT, "Start date is not available")
        if civil_date_of(end) in blackout:
            return ValidationError(ValidationErrorKind.BLACKOUT, "End date is not available")

        # Walk the days in between; empty for an inverted range
        current = start_of_day(start) + MS_PER_DAY
        last = start_of_day(end)
        while current < last:
            if civil_date_of(current) in blackout:
                return ValidationError(
                    ValidationErrorKind.BLACKOUT,
                    "Selected range contains unavailable dates",
                )
            current += MS_PER_DAY
        return None

    def _check_order(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        if start >= end:
            return ValidationError(
                ValidationErrorKind.INVALID_RANGE,
                "Start date must be before end date",
            )
        return None

    def _check_min_duration(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        minimum = constraints.min_duration_minutes
        if minimum is not None and (end - start) / MS_PER_MINUTE < minimum:
            return ValidationError(
                ValidationErrorKind.MIN_DURATION,
                f"Minimum duration is {minimum} minutes",
            )
        return None

    def _check_max_duration(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        maximum = constraints.max_duration_minutes
        if maximum is not None and (end - start) / MS_PER_MINUTE > maximum:
            return ValidationError(
                ValidationErrorKind.MAX_DURATION,
                f"Maximum duration is {maximum} minutes",
            )
        return None

    def _check_min_time(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        earliest = constraints.min_time_of_day
        if earliest is not None and _minutes_of_day(start) < earliest.minutes_since_midnight:
            return ValidationError(
                ValidationErrorKind.MIN_TIME,
                f"Start time must be after {earliest}",
            )
        return None

    def _check_max_time(self, start: int, end: int, constraints: ConstraintConfig) -> Optional[ValidationError]:
        latest = constraints.max_time_of_day
        if latest is not None and _minutes_of_day(end) > latest.minutes_since_midnight:
            return ValidationError(
                ValidationErrorKind.MAX_TIME,
                f"End time must be before {latest}",
            )
        return None


_default_validator = RangeValidator()


def validate_range(
    date_range: DateTimeRange,
    constraints: ConstraintConfig,
) -> Optional[ValidationError]:
    """Module-level shortcut for ``RangeValidator().validate``."""
    return _default_validator.validate(date_range, constraints)


def is_date_disabled(
    value: Union[int, datetime, date, CivilDate],
    constraints: ConstraintConfig,
) -> bool:
    """Module-level shortcut for ``RangeValidator().is_date_disabled``."""
    return _default_validator.is_date_disabled(value, constraints)
