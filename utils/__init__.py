"""
Utilities package initialization.
"""

from .config import EngineSettings, get_settings, configure_logging
from .dates import (
    start_of_day,
    end_of_day,
    is_same_day,
    is_date_between,
    add_days,
    add_months,
    get_days_in_month,
    civil_date_of,
    instant_of_civil_date,
    parse_time,
    format_time,
    get_days_of_week,
    get_month_names,
)

__all__ = [
    "EngineSettings",
    "get_settings",
    "configure_logging",
    "start_of_day",
    "end_of_day",
    "is_same_day",
    "is_date_between",
    "add_days",
    "add_months",
    "get_days_in_month",
    "civil_date_of",
    "instant_of_civil_date",
    "parse_time",
    "format_time",
    "get_days_of_week",
    "get_month_names",
]
