"""
Caller tag derivation and column alignment.
"""

from __future__ import annotations

import inspect
import threading

from .errors import CallerResolutionError

UNKNOWN_TAG = "unknown"

# Modules whose frames belong to the logging machinery, never to the caller
SKIP_MODULES: tuple[str, ...] = ("lnlog", "structlog", "logging")

MAX_STACK_DEPTH = 64


class TagColumn:
    """Tracks the widest tag seen so far and left-pads tags to that width.

    The width only ever grows, so lines already written keep their alignment
    relative to what the reader saw before.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._width = 0
        self._lock = threading.Lock()

    @property
    def width(self) -> int:
        return self._width

    def justify(self, tag: str) -> str:
        if not self.enabled:
            return tag
        with self._lock:
            if len(tag) > self._width:
                self._width = len(tag)
            width = self._width
        return tag.rjust(width)


def _is_skipped(module: str, skip_modules: tuple[str, ...]) -> bool:
    return any(module == name or module.startswith(name + ".") for name in skip_modules)


def find_caller_tag(
    skip_modules: tuple[str, ...] = SKIP_MODULES,
    max_depth: int = MAX_STACK_DEPTH,
) -> str:
    """Return `<module>.<qualname>:<line>` for the first frame outside `skip_modules`.

    Raises:
        CallerResolutionError: no such frame within `max_depth` frames.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(max_depth):
            if frame is None:
                break
            module = frame.f_globals.get("__name__", "")
            if module and not _is_skipped(module, skip_modules):
                code = frame.f_code
                name = getattr(code, "co_qualname", code.co_name)
                ident = module if name == "<module>" else f"{module}.{name}"
                return f"{ident}:{frame.f_lineno:<3}"
            frame = frame.f_back
    finally:
        del frame
    raise CallerResolutionError(depth=max_depth)


def derive_caller_tag(
    skip_modules: tuple[str, ...] = SKIP_MODULES,
    max_depth: int = MAX_STACK_DEPTH,
) -> str:
    """Like `find_caller_tag`, but falls back to `UNKNOWN_TAG` instead of raising."""
    try:
        return find_caller_tag(skip_modules, max_depth)
    except CallerResolutionError:
        return UNKNOWN_TAG
