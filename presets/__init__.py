"""
Presets package initialization.
"""

from .engine import (
    Preset,
    round_to_interval,
    start_of_month,
    get_relative_presets,
    get_absolute_presets,
)

__all__ = [
    "Preset",
    "round_to_interval",
    "start_of_month",
    "get_relative_presets",
    "get_absolute_presets",
]
