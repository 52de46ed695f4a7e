"""Exception hierarchy for call-site tracing.

Only frame resolution and caller-scope evaluation have dedicated types.
Failures of the output sink are not wrapped and surface as whatever the
sink raised.
"""

from __future__ import annotations


class TraceError(Exception):
    """Base class for errors raised while building a trace notice."""


class FrameResolutionError(TraceError):
    """The requested stack depth does not reference a live frame."""

    def __init__(self, depth: int) -> None:
        super().__init__(f"no frame at depth {depth}: call stack is not deep enough")
        self.depth = depth


class EvaluationError(TraceError):
    """An expression could not be evaluated in the caller's frame."""

    def __init__(self, expression: str, reason: str) -> None:
        super().__init__(f"cannot evaluate {expression!r} in caller frame: {reason}")
        self.expression = expression


__all__ = ["EvaluationError", "FrameResolutionError", "TraceError"]
