"""
Caller-input errors raised by the range picker core.

Rule violations found by the range validator are returned as values
(see ``models.schema.ValidationError``) and never raised.
"""

from typing import Optional


class RangePickerError(Exception):
    """Base error for the range picker core."""


class UnknownTimezone(RangePickerError, LookupError):
    """Raised when the offset oracle does not recognise a timezone id."""

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"Unknown timezone: {timezone!r}")


class InvalidCivilDateTime(RangePickerError, ValueError):
    """Raised when civil date/time fields are out of range."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
