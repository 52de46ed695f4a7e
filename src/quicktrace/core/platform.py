"""
Environment glue: whether notices are enabled, and where they are written.

A sink is any ``Callable[[str], None]``. Three are provided:

- :func:`console_sink` prints the line to stdout through a Rich console with
  markup and highlighting disabled, so brackets in values are never styled.
- :func:`logger_sink` sends the line at DEBUG level to the package logger,
  set up by `get_logger()` with its own stream handler.
- :func:`host_logger_sink` sends the line at DEBUG level through the
  program's own logging configuration; "auto" picks it when logging is set up.

Rich expands the tab in `    \t(in ...)` to spaces on the console; the
logger sinks and injected sinks receive the line unchanged.

:func:`resolve_sink` maps the configured sink name onto one of them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError
from rich.console import Console

from .settings import LOGGER_NAME, Settings, get_logger, load_settings

Sink = Callable[[str], None]
EnabledPredicate = Callable[[bool], bool]

_console = Console(highlight=False, markup=False, emoji=False, soft_wrap=True)


def is_tracing_enabled(
    allow_in_production: bool = False,
    settings_loader: Callable[[], Settings] = load_settings,
) -> bool:
    """Return True if a notice may be emitted.

    Notices are always allowed when ``allow_in_production`` is set. Otherwise
    they are allowed unless the settings report a production environment;
    settings that cannot be loaded count as "not production".
    """
    if allow_in_production:
        return True
    try:
        return not settings_loader().is_prod
    except (ValidationError, OSError):
        return True


def console_sink(line: str) -> None:
    _console.print(line)


def logger_sink(line: str) -> None:
    get_logger(LOGGER_NAME).debug(line)


def host_logger_sink(line: str) -> None:
    """Log through the logging setup of the embedding program.

    No handler is attached and propagation is left alone, so the line reaches
    whatever handlers the program configured, at its own levels.
    """
    logging.getLogger(LOGGER_NAME).debug(line)


def logging_configured() -> bool:
    """Return True if the embedding program has set up logging handlers."""
    return bool(logging.getLogger().handlers or logging.getLogger(LOGGER_NAME).handlers)


def resolve_sink(settings: Settings | None = None) -> Sink:
    """Pick the sink named by the settings ("auto" inspects logging setup)."""
    if settings is None:
        try:
            settings = load_settings()
        except ValidationError:
            return console_sink
    if settings.sink == "logger":
        return logger_sink
    if settings.sink == "console":
        return console_sink
    return host_logger_sink if logging_configured() else console_sink


__all__ = [
    "EnabledPredicate",
    "Sink",
    "console_sink",
    "host_logger_sink",
    "is_tracing_enabled",
    "logger_sink",
    "logging_configured",
    "resolve_sink",
]
