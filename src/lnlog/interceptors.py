"""
Interceptors for routing standard library logs into the lnlog sinks.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .core import LoggerState, get_state
from .records import Level, LogRecord

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR = "_lnlog_handler"


class LnHandler(logging.Handler):
    """
    Redirect standard library logging records to an lnlog state.

    Records keep their stdlib logger name as source, so the formatters
    justify their tags themselves instead of trusting a pre-built one.
    """

    def __init__(self, state: LoggerState | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._state = state
        setattr(self, _HANDLER_TAG_ATTR, True)

    @property
    def state(self) -> LoggerState:
        return self._state or get_state()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # lnlog's own diagnostics would loop back into the sinks
            if record.name == "lnlog" or record.name.startswith("lnlog."):
                return

            state = self.state
            level = Level.from_number(record.levelno)
            if not state.is_enabled_for(level):
                return

            name = record.name or "root"
            state.publish(
                LogRecord(
                    timestamp=datetime.fromtimestamp(record.created),
                    level=level,
                    caller_tag=f"{name}:{record.lineno:<3}",
                    message=self.format(record),
                    source=f"stdlib:{name}",
                )
            )
        except Exception:
            self.handleError(record)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def install_stdlib_handler(
    state: LoggerState | None = None,
    logger: logging.Logger | None = None,
) -> LnHandler:
    """
    Attach an LnHandler to `logger` (default: the root logger).

    Previously installed LnHandlers are removed first, so calling this twice
    does not duplicate output.
    """
    target = logger or logging.getLogger()
    remove_stdlib_handler(target)

    handler = LnHandler(state)
    target.addHandler(handler)
    target.setLevel(int((state or get_state()).min_level))
    return handler


def remove_stdlib_handler(logger: logging.Logger | None = None) -> None:
    """Detach all LnHandlers from `logger` (default: the root logger)."""
    target = logger or logging.getLogger()
    for handler in list(target.handlers):
        if _is_our_handler(handler):
            target.removeHandler(handler)
            handler.close()
