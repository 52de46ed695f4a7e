"""quicktrace: one-line call-site tracing for debugging sessions.

    from quicktrace import ref, ts, val

    ts()                   # [TIMESTAMP] #=0001, diff=..., at=...    (in=file.py:3:in 'f')
    val(ref("name"))       # [HelloWorld#hello] name: Charlie    (in file.py:4:in 'hello')

`ts` and `val` are bound methods of a module-level :class:`Tracer`; use
`configure()` to swap its sink, enabled predicate or time keeper, and
`reset()` to go back to the configured defaults.
"""

from __future__ import annotations

from .core.errors import EvaluationError, FrameResolutionError, TraceError
from .core.frames import FrameInspector, MethodKind
from .core.platform import EnabledPredicate, Sink, is_tracing_enabled
from .core.settings import load_settings
from .core.timekeeper import TimeKeeper, get_timekeeper
from .notices import MISSING, Ref, Tracer, ref

__all__ = [
    "MISSING",
    "EvaluationError",
    "FrameInspector",
    "FrameResolutionError",
    "MethodKind",
    "Ref",
    "TimeKeeper",
    "TraceError",
    "Tracer",
    "__version__",
    "configure",
    "get_timekeeper",
    "ref",
    "reset",
    "timestamp_notice",
    "ts",
    "val",
    "value_notice",
]
__version__ = "0.1.0"

_tracer = Tracer()

ts = _tracer.ts
val = _tracer.val
timestamp_notice = ts
value_notice = val


def configure(
    *,
    sink: Sink | None = None,
    enabled: EnabledPredicate | None = None,
    timekeeper: TimeKeeper | None = None,
    strict: bool | None = None,
) -> Tracer:
    """Replace collaborators of the module-level tracer in place.

    Only the arguments that are given are changed. Returns the tracer so
    tests can inspect it.
    """
    if sink is not None:
        _tracer.sink = sink
    if enabled is not None:
        _tracer.enabled = enabled
    if timekeeper is not None:
        _tracer.timekeeper = timekeeper
    if strict is not None:
        _tracer.strict = strict
    return _tracer


def reset() -> Tracer:
    """Restore the module-level tracer to its settings-driven defaults."""
    load_settings.cache_clear()
    _tracer.sink = None
    _tracer.enabled = is_tracing_enabled
    _tracer.timekeeper = get_timekeeper()
    _tracer.strict = None
    return _tracer
