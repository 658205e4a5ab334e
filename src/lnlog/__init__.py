"""
lnlog: leveled logging for many call sites.

Messages are tagged with their caller, filtered by level and fanned out to
a console sink and a fixed ring of size-capped log files:

    import lnlog

    lnlog.configure_logging()
    lnlog.debug("cache warmed")
    lnlog.error(exc)

Library: structlog drives the filter/processor chain; settings come from
pydantic-settings (`LN_LOG_*` environment variables).
"""

from .config import LoggingSettings, LogLevel
from .core import (
    LoggerState,
    TaggedLogger,
    configure_logging,
    debug,
    error,
    get_logger,
    get_state,
    info,
    shutdown,
    warn,
    warning,
)
from .durations import format_elapsed
from .errors import format_exception
from .interceptors import LnHandler, install_stdlib_handler
from .records import Level, LogRecord

__all__ = [
    "Level",
    "LogLevel",
    "LogRecord",
    "LoggerState",
    "LnHandler",
    "LoggingSettings",
    "TaggedLogger",
    "configure_logging",
    "debug",
    "error",
    "format_elapsed",
    "format_exception",
    "get_logger",
    "get_state",
    "info",
    "install_stdlib_handler",
    "shutdown",
    "warn",
    "warning",
]
