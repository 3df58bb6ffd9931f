"""
standsched.settings
~~~~~~~~~~~~~~~~~~~

Environment-driven configuration.  Every field can be overridden with a
``STANDSCHED_``-prefixed environment variable or a ``.env`` file::

    STANDSCHED_DEFAULT_VIEW_MODE=calendar
    STANDSCHED_TIMEZONE=Europe/Amsterdam
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STANDSCHED_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    default_view_mode: Literal["shift", "calendar"] = "shift"
    shift_start_hour: int = Field(default=6, ge=0, le=23)
    timezone: str = "UTC"
    log_level: str = "WARNING"
    # Jobs are loaded this far either side of the window so wrap-around jobs show up.
    fetch_margin_hours: float = Field(default=24.0, ge=0.0)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {v!r}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level {v!r}")
        return level

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> SchedulerSettings:
    return SchedulerSettings()


def configure_logging(settings: SchedulerSettings | None = None) -> None:
    """Apply the configured level to the ``standsched`` logger."""
    settings = settings or get_settings()
    logging.getLogger("standsched").setLevel(settings.log_level)
