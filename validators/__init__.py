"""
Validators package initialization.
"""

from .rules import RangeValidator, ValidationResult, validate_range, is_date_disabled

__all__ = [
    "RangeValidator",
    "ValidationResult",
    "validate_range",
    "is_date_disabled",
]
