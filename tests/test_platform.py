"""Tests for the enabled predicate and the built-in sinks."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from quicktrace.core import platform
from quicktrace.core.platform import (
    console_sink,
    host_logger_sink,
    is_tracing_enabled,
    logger_sink,
    resolve_sink,
)
from quicktrace.core.settings import LOGGER_NAME, Settings, load_settings


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_enabled_outside_production() -> None:
    assert is_tracing_enabled() is True


def test_production_disables_unless_allowed(monkeypatch: Any) -> None:
    monkeypatch.setenv("QUICKTRACE_ENV", "prod")
    load_settings.cache_clear()
    assert is_tracing_enabled() is False
    assert is_tracing_enabled(allow_in_production=True) is True


def test_unreadable_settings_count_as_enabled(monkeypatch: Any) -> None:
    monkeypatch.setenv("QUICKTRACE_ENV", "staging")
    load_settings.cache_clear()
    assert is_tracing_enabled() is True


def test_allow_in_production_skips_settings() -> None:
    def explode() -> Settings:
        raise AssertionError("settings must not be read")

    assert is_tracing_enabled(True, settings_loader=explode) is True


def test_console_sink_prints_plain_text(capsys: Any) -> None:
    console_sink("[HelloWorld#hello] name: [bold]Charlie[/bold]")
    out = capsys.readouterr().out
    assert "[HelloWorld#hello] name: [bold]Charlie[/bold]" in out


def test_logger_sink_writes_debug_record() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    handler = ListHandler()
    logger.addHandler(handler)
    try:
        logger_sink("[TIMESTAMP] #=0001")
    finally:
        logger.removeHandler(handler)
    assert handler.messages == ["[TIMESTAMP] #=0001"]


@pytest.mark.parametrize(  # type: ignore[misc]
    ("name", "expected"),
    [("console", console_sink), ("logger", logger_sink)],
)
def test_resolve_named_sink(name: str, expected: Any) -> None:
    assert resolve_sink(Settings(QUICKTRACE_SINK=name)) is expected


def test_resolve_auto_sink_follows_logging_setup(monkeypatch: Any) -> None:
    auto = Settings(QUICKTRACE_SINK="auto")
    monkeypatch.setattr(platform, "logging_configured", lambda: True)
    assert resolve_sink(auto) is host_logger_sink
    monkeypatch.setattr(platform, "logging_configured", lambda: False)
    assert resolve_sink(auto) is console_sink


def test_auto_sink_reaches_handlers_of_the_host_program(monkeypatch: Any) -> None:
    """With logging configured by the program, lines reach the root handlers."""
    root = logging.getLogger()
    package = logging.getLogger(LOGGER_NAME)
    # A previous `get_logger()` call may have isolated the package logger.
    monkeypatch.setattr(package, "handlers", [])
    monkeypatch.setattr(package, "propagate", True)
    root_level, package_level = root.level, package.level
    handler = ListHandler()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    package.setLevel(logging.NOTSET)
    try:
        sink = resolve_sink(Settings(QUICKTRACE_SINK="auto"))
        sink("[HelloWorld#hello] name: Charlie")
    finally:
        root.removeHandler(handler)
        root.setLevel(root_level)
        package.setLevel(package_level)

    assert sink is host_logger_sink
    assert handler.messages == ["[HelloWorld#hello] name: Charlie"]
    assert package.handlers == []


def test_logger_sinks_keep_the_tab_separator(monkeypatch: Any) -> None:
    package = logging.getLogger(LOGGER_NAME)
    handler = ListHandler()
    monkeypatch.setattr(package, "handlers", [handler])
    level = package.level
    package.setLevel(logging.DEBUG)
    try:
        host_logger_sink("[TIMESTAMP] #=0001    \t(in=a.py:1:in 'f')")
    finally:
        package.setLevel(level)
    assert handler.messages == ["[TIMESTAMP] #=0001    \t(in=a.py:1:in 'f')"]


def test_console_sink_expands_the_tab_separator(capsys: Any) -> None:
    """Rich renders the tab as spaces; fields and their order are unchanged."""
    console_sink("[TIMESTAMP] #=0001    \t(in=a.py:1:in 'f')")
    out = capsys.readouterr().out
    assert "\t" not in out
    assert out.startswith("[TIMESTAMP] #=0001    ")
    assert out.rstrip().endswith("(in=a.py:1:in 'f')")
