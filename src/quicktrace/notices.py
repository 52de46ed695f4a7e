"""
Timestamp and value notices.

A :class:`Tracer` ties together the frame inspector, a time keeper, an
enabled predicate and a sink. Its two notices are meant to be dropped into
code by hand while debugging and removed afterwards:

    from quicktrace import ref, ts, val

    class HelloWorld:
        def hello(self, name):
            ts()
            val(ref("name"))
            ...

which prints something like

    [TIMESTAMP] #=0001, diff=0.000463, at=1451615389.505411    \t(in=/app/hello.py:5:in 'hello')
    [HelloWorld#hello] name: Charlie    \t(in /app/hello.py:6:in 'hello')

Both notices return ``None`` and never add a frame between the statement and
the inspector, which is why the public names are bound methods rather than
wrapper functions.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from .core.errors import TraceError
from .core.frames import FrameInspector
from .core.platform import EnabledPredicate, Sink, is_tracing_enabled, resolve_sink
from .core.settings import load_settings
from .core.timekeeper import TimeKeeper, get_timekeeper

_logger = logging.getLogger(__name__)

UNKNOWN_LOCATION: Final[str] = "<unknown location>"
UNKNOWN_CALLER: Final[str] = "[<unknown caller>]"
NIL: Final[str] = "[nil]"


class _Missing:
    """Marker for `val()` called without an argument."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class Ref(str):
    """A name or expression to be evaluated in the caller's frame.

    ``val(ref("user.email"))`` shows the current value of ``user.email`` as
    seen by the statement, labelled ``user.email:``.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"ref({str.__repr__(self)})"


def ref(expression: str) -> Ref:
    """Wrap ``expression`` so that `val()` evaluates it in the caller's frame."""
    return Ref(expression.strip())


def normalize_label(label: str) -> str:
    """Strip ``label`` and make sure it ends with a colon."""
    text = label.strip()
    return text if text.endswith(":") else f"{text}:"


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


class Tracer:
    """
    Emit timestamp and value notices for the statement that calls them.

    Parameters
    ----------
    sink : Sink | None
        Receives each formatted line. When omitted, the sink named by the
        settings is resolved on first use and kept.
    enabled : EnabledPredicate
        Called with ``allow_in_production``; a False result turns the notice
        into a no-op before any frame is inspected.
    timekeeper : TimeKeeper | None
        Sequence/elapsed-time state; defaults to the shared process keeper.
    inspector : FrameInspector | None
        Frame resolution strategy.
    strict : bool | None
        Let `val()` failures propagate. Defaults to ``Settings.strict``.
    """

    def __init__(
        self,
        sink: Sink | None = None,
        *,
        enabled: EnabledPredicate = is_tracing_enabled,
        timekeeper: TimeKeeper | None = None,
        inspector: FrameInspector | None = None,
        strict: bool | None = None,
    ) -> None:
        self.sink = sink
        self.enabled = enabled
        self.timekeeper = timekeeper
        self.inspector = inspector or FrameInspector()
        self.strict = strict

    # ------------------------------------------------------------------ #
    # Collaborators
    # ------------------------------------------------------------------ #
    def _emit(self, line: str) -> None:
        if self.sink is None:
            self.sink = resolve_sink()
        self.sink(line)

    def _keeper(self) -> TimeKeeper:
        if self.timekeeper is None:
            self.timekeeper = get_timekeeper()
        return self.timekeeper

    def _is_strict(self) -> bool:
        if self.strict is not None:
            return self.strict
        try:
            return load_settings().strict
        except ValueError:
            return False

    def _location(self, depth: int) -> str:
        # depth is relative to the notice method; +1 accounts for this helper.
        try:
            return self.inspector.resolve_source_location(depth + 1)
        except TraceError:
            return UNKNOWN_LOCATION

    # ------------------------------------------------------------------ #
    # Notices
    # ------------------------------------------------------------------ #
    def ts(self, allow_in_production: bool = False) -> None:
        """Emit a numbered timestamp with the time elapsed since the last one.

        Any error while ticking, resolving or emitting is reported as a
        single ``#=FAIL`` line and never propagates. The sequence number of a
        failed tick stays consumed; the previous timestamp is left alone.
        """
        if not self.enabled(allow_in_production):
            return None
        try:
            with self._keeper().stamp() as reading:
                location = self.inspector.resolve_source_location(1)
                self._emit(
                    f"[TIMESTAMP] #={reading.sequence:04d}, "
                    f"diff={reading.elapsed:.6f}, "
                    f"at={reading.now:.6f}"
                    f"    \t(in={location})"
                )
        except Exception as exc:
            _logger.debug("timestamp notice failed", exc_info=True)
            self._emit(f"[TIMESTAMP] #=FAIL, in={self._location(1)}, err={_describe(exc)}")
        return None

    def val(
        self,
        argument: Any = MISSING,
        label: str | None = None,
        allow_in_production: bool = False,
    ) -> None:
        """Emit the value of ``argument`` tagged with its caller's identity.

        A :class:`Ref` argument is evaluated in the caller's frame and labelled
        with its own text; any other argument is shown as given. An explicit
        ``label`` replaces the default one.
        """
        if not self.enabled(allow_in_production):
            return None
        tag = UNKNOWN_CALLER
        try:
            tag = self.inspector.compose_caller_tag(1)
            text = None
            if isinstance(argument, Ref):
                value = self.inspector.evaluate_in_frame(1, str(argument))
                text = f"{argument}:"
            elif argument is MISSING:
                value = None
            else:
                value = argument
            if label is not None:
                text = normalize_label(label)
            location = self.inspector.resolve_source_location(1)
            shown = NIL if value is None else str(value)
            line = f"{tag} {text or ''} {shown}    \t(in {location})"
        except Exception as exc:
            if self._is_strict():
                raise
            _logger.debug("value notice failed", exc_info=True)
            self._emit(f"{tag} #=FAIL, in={self._location(1)}, err={_describe(exc)}")
            return None

        self._emit(line)
        return None

    timestamp_notice = ts
    value_notice = val


__all__ = ["MISSING", "NIL", "Ref", "Tracer", "normalize_label", "ref"]
