"""
Caller identity and caller-scope evaluation over live Python frames.

This module answers two questions about a frame further up the call stack:

- *Who* is running there: the enclosing class, the method name, and whether
  the method was called on a class or on an instance.
- *What* a name or expression evaluates to when read from inside that frame.

Depth convention
----------------
Every public method takes a relative ``depth``. ``depth=0`` designates the
frame that called the method; ``depth=1`` its caller, and so on. A method that
delegates to another one passes ``depth + 1`` so that callers never need to
know how deep the inspector itself is.

Frames are looked up on every call and released before returning; no frame
object is ever stored on the inspector.

Receiver detection
------------------
Python frames do not carry a receiver, so it is recovered from the frame's
first positional argument. That argument is accepted as the receiver only if
its class (or the argument itself, when it is a class) defines somewhere in
its MRO a function whose code object *is* the frame's code object. A plain
function whose first parameter happens to hold an object therefore does not
get mistaken for a method of that object's class.
"""

from __future__ import annotations

import enum
import inspect
import sys
from types import CodeType, FrameType
from typing import Any

from .errors import EvaluationError, FrameResolutionError

ANONYMOUS_CLASS = "<anonymous class>"
ANONYMOUS_METHOD = "<anonymous method>"


class MethodKind(enum.Enum):
    """Whether the active receiver of a frame is a class or an instance."""

    CLASS = "."
    INSTANCE = "#"

    @property
    def delimiter(self) -> str:
        return self.value


def _frame_at(depth: int) -> FrameType:
    # +2 skips this helper and the public inspector method that called it.
    try:
        return sys._getframe(depth + 2)
    except ValueError as exc:
        raise FrameResolutionError(depth) from exc


def _function_code(attr: Any) -> CodeType | None:
    """Return the code object behind a class attribute, if it wraps a function."""
    if isinstance(attr, (classmethod, staticmethod)):
        attr = attr.__func__
    try:
        attr = inspect.unwrap(attr)
    except ValueError:
        return None
    return getattr(attr, "__code__", None)


def _defines_code(klass: type, name: str, code: CodeType) -> bool:
    names = [name]
    if name.startswith("__") and not name.endswith("__"):
        names.append(f"_{klass.__name__.lstrip('_')}{name}")
    for attr_name in names:
        attr = klass.__dict__.get(attr_name)
        if attr is None:
            continue
        if isinstance(attr, property):
            candidates = [attr.fget, attr.fset, attr.fdel]
        else:
            candidates = [attr]
        if any(c is not None and _function_code(c) is code for c in candidates):
            return True
    return False


def _enclosing(frame: FrameType) -> FrameType:
    """Step out of lambdas and generator expressions to the frame running them."""
    while (
        frame.f_code.co_name.startswith("<")
        and frame.f_code.co_name != "<module>"
        and frame.f_back is not None
    ):
        frame = frame.f_back
    return frame


def _receiver(frame: FrameType) -> Any | None:
    """Return the object the frame's method was invoked on, or None."""
    code = frame.f_code
    if code.co_argcount == 0:
        return None
    first = code.co_varnames[0]
    f_locals = frame.f_locals
    if first not in f_locals:
        return None
    candidate = f_locals[first]
    # A class receiver may run a classmethod of its own or a metaclass method.
    owners = [candidate, type(candidate)] if isinstance(candidate, type) else [type(candidate)]
    for owner in owners:
        for klass in owner.__mro__:
            if _defines_code(klass, code.co_name, code):
                return candidate
    return None


class FrameInspector:
    """Resolve identity, location and values of frames up the call stack."""

    def resolve_class_name(self, depth: int = 0) -> str:
        """Return the receiver's class name, or ``<anonymous class>``.

        For a receiver that is itself a class (a classmethod call), the
        class's own name is returned, not the name of its metaclass.
        """
        frame = _enclosing(_frame_at(depth))
        try:
            receiver = _receiver(frame)
        finally:
            del frame
        if receiver is None:
            return ANONYMOUS_CLASS
        owner = receiver if isinstance(receiver, type) else type(receiver)
        name = getattr(owner, "__name__", None)
        return name or ANONYMOUS_CLASS

    def resolve_method_name(self, depth: int = 0) -> str:
        """Return the active function name, or ``<anonymous method>``.

        Lambdas and generator expressions report the function that runs them.
        """
        name = _enclosing(_frame_at(depth)).f_code.co_name
        if not name or name.startswith("<"):
            return ANONYMOUS_METHOD
        return name

    def resolve_method_kind(self, depth: int = 0) -> MethodKind:
        frame = _enclosing(_frame_at(depth))
        try:
            receiver = _receiver(frame)
        finally:
            del frame
        return MethodKind.CLASS if isinstance(receiver, type) else MethodKind.INSTANCE

    def resolve_source_location(self, depth: int = 0) -> str:
        """Return ``path:line:in 'name'`` for the frame's current line."""
        frame = _frame_at(depth)
        try:
            code = frame.f_code
            return f"{code.co_filename}:{frame.f_lineno}:in '{code.co_name}'"
        finally:
            del frame

    def evaluate_in_frame(self, depth: int, expression: str) -> Any:
        """Evaluate ``expression`` as if it were written inside the target frame.

        The frame's globals and a snapshot of its locals are used. A bare
        identifier that is bound neither locally nor globally is looked up as
        an attribute of the frame's receiver, so ``ref("name")`` inside a
        method also finds ``self.name``.

        Raises
        ------
        EvaluationError
            If the expression does not compile or raises while evaluating.
        """
        frame = _frame_at(depth)
        try:
            f_globals = frame.f_globals
            f_locals = dict(frame.f_locals)
            receiver = _receiver(frame)
        finally:
            del frame
        try:
            return eval(expression, f_globals, f_locals)
        except NameError as exc:
            if expression.isidentifier() and receiver is not None:
                try:
                    return getattr(receiver, expression)
                except AttributeError:
                    pass
                except Exception as attr_exc:
                    raise EvaluationError(
                        expression, f"{type(attr_exc).__name__}: {attr_exc}"
                    ) from attr_exc
            raise EvaluationError(expression, f"{type(exc).__name__}: {exc}") from exc
        except Exception as exc:
            raise EvaluationError(expression, f"{type(exc).__name__}: {exc}") from exc

    def compose_caller_tag(self, depth: int = 0) -> str:
        """Return ``[Class#method]`` or ``[Class.method]`` for the target frame."""
        kind = self.resolve_method_kind(depth + 1)
        return (
            f"[{self.resolve_class_name(depth + 1)}"
            f"{kind.delimiter}"
            f"{self.resolve_method_name(depth + 1)}]"
        )


__all__ = ["ANONYMOUS_CLASS", "ANONYMOUS_METHOD", "FrameInspector", "MethodKind"]
