"""
Tests for range validation rules.
"""

import pytest
from datetime import date, datetime, timezone
from models.enums import ValidationErrorKind
from models.schema import CivilDate, ConstraintConfig, DateTimeRange, datetime_to_instant
from validators.rules import RangeValidator, ValidationResult, validate_range, is_date_disabled


def at(text: str) -> int:
    """Instant from an ISO string."""
    return datetime_to_instant(datetime.fromisoformat(text.replace("Z", "+00:00")))


@pytest.fixture
def validator():
    return RangeValidator()


@pytest.fixture
def afternoon():
    """A valid four-hour range on 2024-03-15."""
    return DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-15T14:00:00Z"))


# ===================================================================
# validate
# ===================================================================


def test_valid_range(validator, afternoon):
    """Test a range with no constraints is valid."""
    assert validator.validate(afternoon, ConstraintConfig()) is None


def test_partial_range_is_never_invalid(validator):
    """Test partial selections pass whatever the constraints."""
    strict = ConstraintConfig(
        min_instant="2030-01-01T00:00:00Z",
        blackout_dates=["2024-03-15"],
        min_duration_minutes=600,
    )
    assert validator.validate(DateTimeRange(start=at("2024-03-15T10:00:00Z")), strict) is None
    assert validator.validate(DateTimeRange(end=at("2024-03-15T10:00:00Z")), strict) is None
    assert validator.validate(DateTimeRange(), strict) is None


def test_min_date(validator, afternoon):
    """Test start before the minimum date."""
    result = validator.validate(afternoon, ConstraintConfig(min_instant="2024-03-20T00:00:00Z"))
    assert result.kind == ValidationErrorKind.MIN_DATE
    assert "2024-03-20" in result.message


def test_max_date(validator, afternoon):
    """Test end after the maximum date."""
    result = validator.validate(afternoon, ConstraintConfig(max_instant="2024-03-10T00:00:00Z"))
    assert result.kind == ValidationErrorKind.MAX_DATE


def test_date_bounds_inclusive(validator, afternoon):
    """Test a range touching both bounds exactly is valid."""
    constraints = ConstraintConfig(min_instant=afternoon.start, max_instant=afternoon.end)
    assert validator.validate(afternoon, constraints) is None


def test_blackout_start_day(validator, afternoon):
    """Test a blacked-out start day."""
    result = validator.validate(afternoon, ConstraintConfig(blackout_dates=[CivilDate(2024, 3, 15)]))
    assert result.kind == ValidationErrorKind.BLACKOUT
    assert result.message == "Start date is not available"


def test_blackout_end_day(validator):
    """Test a blacked-out end day."""
    date_range = DateTimeRange(start=at("2024-03-14T10:00:00Z"), end=at("2024-03-15T10:00:00Z"))
    result = validator.validate(date_range, ConstraintConfig(blackout_dates=["2024-03-15"]))
    assert result.kind == ValidationErrorKind.BLACKOUT
    assert result.message == "End date is not available"


def test_blackout_interior_day(validator):
    """Test a blacked-out day strictly inside the range."""
    date_range = DateTimeRange(start=at("2024-03-14T10:00:00Z"), end=at("2024-03-18T10:00:00Z"))
    result = validator.validate(date_range, ConstraintConfig(blackout_dates=["2024-03-16"]))
    assert result.kind == ValidationErrorKind.BLACKOUT
    assert result.message == "Selected range contains unavailable dates"


def test_blackout_outside_range(validator):
    """Test blackout days outside the range are ignored."""
    date_range = DateTimeRange(start=at("2024-03-14T10:00:00Z"), end=at("2024-03-18T10:00:00Z"))
    constraints = ConstraintConfig(blackout_dates=["2024-03-13", "2024-03-19"])
    assert validator.validate(date_range, constraints) is None


def test_invalid_range(validator):
    """Test start after end."""
    date_range = DateTimeRange(start=at("2024-03-15T14:00:00Z"), end=at("2024-03-15T10:00:00Z"))
    result = validator.validate(date_range, ConstraintConfig())
    assert result.kind == ValidationErrorKind.INVALID_RANGE


def test_empty_range_is_invalid(validator):
    """Test start equal to end."""
    instant = at("2024-03-15T10:00:00Z")
    result = validator.validate(DateTimeRange(start=instant, end=instant), ConstraintConfig())
    assert result.kind == ValidationErrorKind.INVALID_RANGE


def test_min_duration(validator):
    """Test a range shorter than the minimum duration."""
    date_range = DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-15T10:30:00Z"))
    result = validator.validate(date_range, ConstraintConfig(min_duration_minutes=60))
    assert result.kind == ValidationErrorKind.MIN_DURATION
    assert "60" in result.message


def test_max_duration(validator):
    """Test a range longer than the maximum duration."""
    date_range = DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-15T20:00:00Z"))
    result = validator.validate(date_range, ConstraintConfig(max_duration_minutes=8 * 60))
    assert result.kind == ValidationErrorKind.MAX_DURATION


def test_duration_bounds_inclusive(validator, afternoon):
    """Test a duration equal to both bounds is valid."""
    constraints = ConstraintConfig(min_duration_minutes=240, max_duration_minutes=240)
    assert validator.validate(afternoon, constraints) is None


def test_fractional_duration(validator):
    """Test durations are not rounded to whole minutes."""
    date_range = DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-15T10:59:30Z"))
    result = validator.validate(date_range, ConstraintConfig(min_duration_minutes=60))
    assert result.kind == ValidationErrorKind.MIN_DURATION


def test_min_time(validator, afternoon):
    """Test a start earlier than the minimum time of day."""
    result = validator.validate(afternoon, ConstraintConfig(min_time_of_day="10:30"))
    assert result.kind == ValidationErrorKind.MIN_TIME
    assert "10:30" in result.message


def test_max_time(validator, afternoon):
    """Test an end later than the maximum time of day."""
    result = validator.validate(afternoon, ConstraintConfig(max_time_of_day="13:45"))
    assert result.kind == ValidationErrorKind.MAX_TIME


def test_time_bounds_ignore_seconds(validator):
    """Test time-of-day rules compare at minute precision."""
    date_range = DateTimeRange(start=at("2024-03-15T09:00:30Z"), end=at("2024-03-15T17:00:45Z"))
    constraints = ConstraintConfig(min_time_of_day="09:00", max_time_of_day="17:00")
    assert validator.validate(date_range, constraints) is None


# ===================================================================
# Precedence
# ===================================================================


def test_min_date_beats_max_duration(validator):
    """Test the first rule in order wins when several fail."""
    date_range = DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-16T10:00:00Z"))
    constraints = ConstraintConfig(min_instant="2024-03-20", max_duration_minutes=60)
    assert validator.validate(date_range, constraints).kind == ValidationErrorKind.MIN_DATE


def test_blackout_beats_invalid_range(validator):
    """Test blackout days are checked before ordering."""
    date_range = DateTimeRange(start=at("2024-03-15T14:00:00Z"), end=at("2024-03-15T10:00:00Z"))
    constraints = ConstraintConfig(blackout_dates=["2024-03-15"])
    assert validator.validate(date_range, constraints).kind == ValidationErrorKind.BLACKOUT


def test_invalid_range_beats_duration(validator):
    """Test an inverted range is reported as such, not as too short."""
    date_range = DateTimeRange(start=at("2024-03-15T14:00:00Z"), end=at("2024-03-15T10:00:00Z"))
    constraints = ConstraintConfig(min_duration_minutes=60)
    assert validator.validate(date_range, constraints).kind == ValidationErrorKind.INVALID_RANGE


def test_duration_beats_time_of_day(validator):
    """Test duration rules come before time-of-day rules."""
    date_range = DateTimeRange(start=at("2024-03-15T06:00:00Z"), end=at("2024-03-15T06:10:00Z"))
    constraints = ConstraintConfig(min_duration_minutes=30, min_time_of_day="09:00")
    assert validator.validate(date_range, constraints).kind == ValidationErrorKind.MIN_DURATION


def test_validate_is_pure(validator, afternoon):
    """Test repeated calls agree and leave inputs untouched."""
    constraints = ConstraintConfig(max_duration_minutes=60, blackout_dates=["2024-03-20"])
    snapshot = constraints.to_dict()

    first = validator.validate(afternoon, constraints)
    second = validator.validate(afternoon, constraints)
    assert first == second
    assert first.kind == ValidationErrorKind.MAX_DURATION
    assert constraints.to_dict() == snapshot
    assert afternoon == DateTimeRange(start=at("2024-03-15T10:00:00Z"), end=at("2024-03-15T14:00:00Z"))


def test_module_level_validate_range(afternoon):
    """Test the module-level shortcut."""
    assert validate_range(afternoon, ConstraintConfig()) is None
    assert validate_range(afternoon, ConstraintConfig(min_duration_minutes=300)).kind == (
        ValidationErrorKind.MIN_DURATION
    )


# ===================================================================
# collect
# ===================================================================


def test_collect_reports_all_violations(validator):
    """Test every failing rule is reported in order."""
    date_range = DateTimeRange(start=at("2024-03-15T06:00:00Z"), end=at("2024-03-15T20:00:00Z"))
    constraints = ConstraintConfig(
        min_instant="2024-03-20",
        max_duration_minutes=60,
        min_time_of_day="09:00",
        max_time_of_day="17:00",
    )
    result = validator.collect(date_range, constraints)

    assert isinstance(result, ValidationResult)
    assert not result.is_valid
    assert [e.kind for e in result.errors] == [
        ValidationErrorKind.MIN_DATE,
        ValidationErrorKind.MAX_DURATION,
        ValidationErrorKind.MIN_TIME,
        ValidationErrorKind.MAX_TIME,
    ]
    assert result.first == validator.validate(date_range, constraints)
    assert result.to_dict()["error_count"] == 4


def test_collect_skips_duration_for_inverted_range(validator):
    """Test duration rules are not evaluated once the range is inverted."""
    date_range = DateTimeRange(start=at("2024-03-15T14:00:00Z"), end=at("2024-03-15T10:00:00Z"))
    result = validator.collect(date_range, ConstraintConfig(min_duration_minutes=60))
    assert [e.kind for e in result.errors] == [ValidationErrorKind.INVALID_RANGE]


def test_collect_valid_and_partial(validator, afternoon):
    """Test empty results for valid and partial ranges."""
    assert validator.collect(afternoon, ConstraintConfig()).is_valid
    assert validator.collect(afternoon, ConstraintConfig()).first is None
    partial = DateTimeRange(start=afternoon.start)
    assert validator.collect(partial, ConstraintConfig(min_instant="2030-01-01")).is_valid


# ===================================================================
# is_date_disabled
# ===================================================================


def test_enabled_date(validator):
    """Test dates with no applicable constraint are enabled."""
    assert not validator.is_date_disabled(at("2024-03-15T10:00:00Z"), ConstraintConfig())


def test_disabled_before_min_date(validator):
    """Test dates before the minimum are disabled."""
    constraints = ConstraintConfig(min_instant="2024-03-20")
    assert validator.is_date_disabled(date(2024, 3, 15), constraints)
    assert validator.is_date_disabled(CivilDate(2024, 3, 15), constraints)
    assert not validator.is_date_disabled(date(2024, 3, 20), constraints)


def test_disabled_after_max_date(validator):
    """Test dates after the maximum are disabled."""
    constraints = ConstraintConfig(max_instant="2024-03-20")
    assert validator.is_date_disabled(datetime(2024, 3, 21, tzinfo=timezone.utc), constraints)
    assert not validator.is_date_disabled(date(2024, 3, 19), constraints)


def test_disabled_blackout(validator):
    """Test blacked-out days are disabled at any time of day."""
    constraints = ConstraintConfig(blackout_dates=["2024-03-15"])
    assert validator.is_date_disabled(at("2024-03-15T10:00:00Z"), constraints)
    assert validator.is_date_disabled(at("2024-03-15T23:59:59Z"), constraints)
    assert not validator.is_date_disabled(at("2024-03-16T00:00:00Z"), constraints)


def test_disabled_ignores_range_rules():
    """Test duration and time-of-day rules never disable a date."""
    constraints = ConstraintConfig(
        min_duration_minutes=600,
        min_time_of_day="23:00",
        max_time_of_day="23:30",
    )
    assert not is_date_disabled(date(2024, 3, 15), constraints)
