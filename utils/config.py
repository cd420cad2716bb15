"""
Engine settings and logging setup.

Settings come from ``RANGEPICKER_*`` environment variables layered over a
``.env`` file; the process environment wins.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional
import pytz
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, field_validator
from models.enums import AmbiguityPolicy


ENV_PREFIX = "RANGEPICKER_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class EngineSettings(BaseModel):
    """Tunables for the timezone resolver and logging."""
    default_timezone: str = Field("UTC", description="Zone used when the caller names none")
    search_window_hours: int = Field(
        24, ge=1, le=72,
        description="Half-width of the civil-to-instant search window",
    )
    max_iterations: int = Field(
        32, ge=20, le=64,
        description="Bisection iteration ceiling",
    )
    ambiguity_policy: AmbiguityPolicy = Field(
        AmbiguityPolicy.EARLIER,
        description="Which occurrence to pick for a repeated wall-clock time",
    )
    log_level: str = Field("WARNING", description="Root logging level")

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate IANA timezone."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Invalid IANA timezone: {v}")
        return v

    @field_validator("ambiguity_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineSettings":
        """
        Build settings from the environment.

        Args:
            env_file: Path to a .env file. When omitted, a ``.env`` in the
                working directory (or a parent) is used if present.

        Returns:
            Validated EngineSettings
        """
        path = env_file if env_file is not None else find_dotenv(usecwd=True)
        merged: Dict[str, Optional[str]] = dict(dotenv_values(path))
        merged.update(os.environ)

        values = {}
        for key, value in merged.items():
            if key.startswith(ENV_PREFIX) and value is not None:
                values[key[len(ENV_PREFIX):].lower()] = value
        return cls(**{k: v for k, v in values.items() if k in cls.model_fields})


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, read from the environment once."""
    return EngineSettings.from_env()


def configure_logging(settings: Optional[EngineSettings] = None) -> None:
    """Configure root logging at the configured level."""
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
