"""Core building blocks: frame inspection, time keeping, settings and sinks.

Import from the submodules directly, e.g.
    from quicktrace.core.frames import FrameInspector
"""

from __future__ import annotations

__all__ = ["__doc__"]
