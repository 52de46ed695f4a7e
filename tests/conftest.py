"""Shared fixtures for the quicktrace test-suite."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from quicktrace.core.settings import load_settings
from quicktrace.core.timekeeper import TimeKeeper
from quicktrace.notices import Tracer

ENV_VARS = ("QUICKTRACE_ENV", "QUICKTRACE_SINK", "QUICKTRACE_STRICT", "LOG_LEVEL")


class FakeClock:
    """Clock returning scripted epoch seconds, one per call."""

    def __init__(self, *times: float) -> None:
        self._times = list(times)
        self.calls = 0

    def __call__(self) -> float:
        value = self._times[min(self.calls, len(self._times) - 1)]
        self.calls += 1
        return value


@pytest.fixture(autouse=True)  # type: ignore[misc]
def clean_settings(monkeypatch: Any) -> Iterator[None]:
    """Run every test against default settings, and rebuild them afterwards."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def lines() -> list[str]:
    """List used as a sink: `lines.append` receives every emitted line."""
    return []


@pytest.fixture  # type: ignore[misc]
def clock() -> FakeClock:
    return FakeClock(100.0, 100.25, 100.75, 101.0, 102.0)


@pytest.fixture  # type: ignore[misc]
def tracer(lines: list[str], clock: FakeClock) -> Tracer:
    """An always-enabled tracer writing into `lines` with a scripted clock."""
    return Tracer(
        sink=lines.append,
        enabled=lambda allow: True,
        timekeeper=TimeKeeper(clock=clock),
        strict=False,
    )
