"""
lnlog exception hierarchy.

None of these ever reach application code: the logger core catches them at
the sink boundary and reports them through the console error channel.
"""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Any, Dict, Optional

from .records import Level

if TYPE_CHECKING:
    from .console import ConsolePrimitive

ERROR_TAG = "lnlog"


class LnError(Exception):
    """Root of all lnlog failures."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class SinkInitError(LnError):
    """A sink could not be constructed; it stays disabled for the process."""

    def __init__(self, *, sink: str, reason: str) -> None:
        super().__init__(
            f"Sink '{sink}' could not be initialised: {reason}",
            code="SINK_INIT_FAILED",
            details={"sink": sink, "reason": reason},
        )


class SinkWriteError(LnError):
    """A single write to a sink failed."""

    def __init__(self, *, sink: str, reason: str) -> None:
        super().__init__(
            f"Sink '{sink}' failed to write: {reason}",
            code="SINK_WRITE_FAILED",
            details={"sink": sink, "reason": reason},
        )


class CallerResolutionError(LnError):
    """No application frame was found on the call stack."""

    def __init__(self, *, depth: int) -> None:
        super().__init__(
            f"No caller frame found within {depth} frames",
            code="CALLER_NOT_FOUND",
            details={"depth": depth},
        )


def format_exception(exc: BaseException) -> str:
    """Render an exception with its full cause chain and traceback."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def report_failure(console: ConsolePrimitive, message: str, exc: Optional[BaseException] = None) -> None:
    """Report an internal failure on the console error channel. Never raises."""
    text = message if exc is None else f"{message} {format_exception(exc)}"
    try:
        console.print(Level.ERROR, ERROR_TAG, text)
    except Exception:
        # the error channel itself is gone; nowhere left to report
        pass
