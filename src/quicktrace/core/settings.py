"""Centralized configuration using Pydantic Settings (v2).

Values are read from:
- Real environment variables (highest precedence)
- `.env` / `.env.local` files in the working directory

Unlike an application, a tracing helper must never break the import of the
code it instruments, so there is no import-time settings singleton: callers
go through the cached `load_settings()` and decide how to handle a bad value.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
SinkName = Literal["auto", "console", "logger"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOGGER_NAME = "quicktrace"


class Settings(BaseSettings):
    """Typed tracing configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Run mode of the embedding program; maps from `QUICKTRACE_ENV`.
        Notices are suppressed in "prod" unless explicitly allowed.
    sink : SinkName
        Where notices go; maps from `QUICKTRACE_SINK`. "auto" picks the
        logger when logging has been configured, the console otherwise.
    strict : bool
        When true, failures inside `val()` propagate to the caller instead of
        being reported as a failure line; maps from `QUICKTRACE_STRICT`.
    log_level : LogLevelName
        Level of the package logger; maps from `LOG_LEVEL`.
    """

    environment: EnvName = Field(default="dev", alias="QUICKTRACE_ENV")
    sink: SinkName = Field(default="auto", alias="QUICKTRACE_SINK")
    strict: bool = Field(default=False, alias="QUICKTRACE_STRICT")
    log_level: LogLevelName = Field(default="DEBUG", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_prod(self) -> bool:
        """Return True if the embedding program runs in production mode."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.DEBUG)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    return Settings()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return a process-global logger configured to the settings log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["LOGGER_NAME", "Settings", "get_logger", "load_settings"]
