"""
Core logger state, the structlog processor chain and the process-wide facade.
"""

from __future__ import annotations

import atexit
import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError
from structlog.typing import EventDict, WrappedLogger

from .config import LoggingSettings
from .console import ConsolePrimitive, StreamConsole
from .errors import LnError, format_exception, report_failure
from .formatters import FORMATTERS, FormatState
from .records import Level, LogRecord
from .sinks import BaseSink, build_sinks
from .tags import TagColumn, derive_caller_tag

# =============================================================================
# Structlog Processors
# =============================================================================


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Translate the structlog method name into a Level."""
    event_dict["level"] = Level.from_name(method_name)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add local wall-clock timestamp to log event."""
    event_dict["timestamp"] = datetime.now()
    return event_dict


def merge_exception(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Append the text rendered by `format_exc_info` to the message."""
    exception = event_dict.pop("exception", None)
    if exception:
        event = event_dict.get("event") or ""
        exception = str(exception).rstrip("\n")
        event_dict["event"] = f"{event}\n{exception}" if event else exception
    return event_dict


# =============================================================================
# Logger State
# =============================================================================


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of fanning one record out to the sinks."""

    delivered: int
    failures: tuple[Exception, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


class LoggerState:
    """
    Everything one logging pipeline needs: settings, sinks, and the mutable
    tag column, rotation and elapsed-time state behind a single lock.

    Args:
        settings: Frozen logging settings (default: loaded from the environment)
        console: Console primitive, also used as the error channel
        sinks: Explicit sink list; built from `settings` when omitted
    """

    def __init__(
        self,
        settings: LoggingSettings | None = None,
        *,
        console: ConsolePrimitive | None = None,
        sinks: list[BaseSink] | None = None,
    ):
        self.settings = settings if settings is not None else LoggingSettings()
        self.min_level = self.settings.min_level
        self.console: ConsolePrimitive = console or StreamConsole()
        self.format_state = FormatState(
            tag_column=TagColumn(self.settings.left_justify_tags),
            timestamp_format=self.settings.timestamp_format,
        )
        self.sinks: list[BaseSink] = sinks if sinks is not None else build_sinks(self.settings, self.console)
        self.failure_counts: Counter[str] = Counter()
        self._lock = threading.RLock()
        self._closed = False
        self._logger = structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[
                add_level,
                add_timestamp,
                self._add_caller_tag,
                structlog.processors.format_exc_info,
                merge_exception,
                self._dispatch,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(int(self.min_level)),
            context_class=dict,
            cache_logger_on_first_use=False,
        ).bind()

    @property
    def tag_column(self) -> TagColumn:
        return self.format_state.tag_column

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def is_enabled_for(self, level: Level) -> bool:
        return bool(self.sinks) and level >= self.min_level

    def log(
        self,
        level: Level,
        message: str,
        *,
        tag: str | None = None,
        exc_info: Any = None,
    ) -> None:
        # checked before any tag derivation or formatting
        if not self.is_enabled_for(level):
            return

        kw: dict[str, Any] = {}
        if tag is not None:
            kw["tag"] = tag
        if exc_info is not None:
            kw["exc_info"] = exc_info

        try:
            with self._lock:
                self._logger.log(int(level), message, **kw)
        except Exception as e:
            report_failure(self.console, "Logging call failed.", e)

    def debug(self, message: str, *, tag: str | None = None) -> None:
        self.log(Level.DEBUG, message, tag=tag)

    def info(self, message: str, *, tag: str | None = None) -> None:
        self.log(Level.INFO, message, tag=tag)

    def warn(self, message: str, *, tag: str | None = None) -> None:
        self.log(Level.WARN, message, tag=tag)

    warning = warn

    def error(
        self,
        message: str | BaseException,
        *,
        tag: str | None = None,
        exc_info: Any = None,
    ) -> None:
        """Log at ERROR; an exception value is rendered with its cause chain and traceback."""
        if isinstance(message, BaseException):
            if not self.is_enabled_for(Level.ERROR):
                return
            message = format_exception(message).rstrip("\n")
        self.log(Level.ERROR, message, tag=tag, exc_info=exc_info)

    def get_logger(self, name: str | None = None) -> TaggedLogger:
        """Get a logger handle bound to `name`; unnamed handles derive tags from the stack."""
        return TaggedLogger(self, name)

    def publish(self, record: LogRecord) -> DispatchResult:
        """Dispatch a record built outside the processor chain."""
        if not self.is_enabled_for(record.level):
            return DispatchResult(delivered=0)
        with self._lock:
            return self._write_all(record)

    def flush(self) -> None:
        with self._lock:
            for sink in self.sinks:
                try:
                    sink.flush()
                except Exception as e:
                    report_failure(self.console, f"Sink '{sink.name}' failed to flush.", e)

    def close(self) -> None:
        """Flush and close every sink. Later calls are no-ops."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            sinks, self.sinks = self.sinks, []
            for sink in sinks:
                try:
                    sink.flush()
                    sink.close()
                except Exception as e:
                    report_failure(self.console, f"Sink '{sink.name}' failed to close.", e)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _add_caller_tag(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        tag = event_dict.pop("tag", None)
        if tag is None:
            tag = derive_caller_tag()
        event_dict["tag"] = self.tag_column.justify(str(tag))
        return event_dict

    def _dispatch(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        record = LogRecord(
            timestamp=event_dict["timestamp"],
            level=event_dict["level"],
            caller_tag=event_dict["tag"],
            message=str(event_dict.get("event", "")),
        )
        self._write_all(record)
        # the wrapped ReturnLogger has nothing left to do
        raise structlog.DropEvent

    def _write_all(self, record: LogRecord) -> DispatchResult:
        delivered = 0
        failures: list[Exception] = []
        for sink in self.sinks:
            try:
                text = FORMATTERS[sink.line_format](record, self.format_state)
                sink.write(record, text)
                delivered += 1
            except LnError as e:
                failures.append(e)
                self.failure_counts[sink.name] += 1
                report_failure(self.console, str(e))
            except Exception as e:
                failures.append(e)
                self.failure_counts[sink.name] += 1
                report_failure(self.console, f"Sink '{sink.name}' failed to write.", e)
        return DispatchResult(delivered=delivered, failures=tuple(failures))


class TaggedLogger:
    """Logger handle bound to a component name at construction time."""

    def __init__(self, state: LoggerState, name: str | None = None):
        self._state = state
        self.name = name

    def debug(self, message: str) -> None:
        self._state.log(Level.DEBUG, message, tag=self.name)

    def info(self, message: str) -> None:
        self._state.log(Level.INFO, message, tag=self.name)

    def warn(self, message: str) -> None:
        self._state.log(Level.WARN, message, tag=self.name)

    warning = warn

    def error(self, message: str | BaseException, *, exc_info: Any = None) -> None:
        self._state.error(message, tag=self.name, exc_info=exc_info)

    def __repr__(self) -> str:
        return f"<TaggedLogger name={self.name!r}>"


# =============================================================================
# Global State
# =============================================================================

_state: LoggerState | None = None
_state_lock = threading.Lock()


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    console: ConsolePrimitive | None = None,
    force: bool = False,
) -> LoggerState:
    """
    Create the process-wide logger state.

    Idempotent: later calls return the existing state unless `force` is set,
    in which case the old state is closed and replaced.

    Args:
        settings: Logging settings (default: loaded from LN_LOG_* environment)
        console: Console primitive (default: stderr)
        force: Replace an existing state
    """
    global _state

    with _state_lock:
        if _state is not None and not force:
            return _state
        if _state is not None:
            atexit.unregister(_state.close)
            _state.close()
        state = LoggerState(settings, console=console)
        # flush buffered file writes at interpreter exit
        atexit.register(state.close)
        _state = state
        return state


def get_state() -> LoggerState:
    """Return the process-wide state, configuring it from the environment on first use."""
    state = _state
    if state is None:
        try:
            state = configure_logging()
        except ValidationError as e:
            console = StreamConsole()
            report_failure(console, "Invalid logging settings; falling back to defaults.", e)
            state = configure_logging(LoggingSettings.model_construct(), console=console)
    return state


def shutdown() -> None:
    """Close and forget the process-wide state."""
    global _state

    with _state_lock:
        state, _state = _state, None
    if state is not None:
        atexit.unregister(state.close)
        state.close()


def get_logger(name: str | None = None) -> TaggedLogger:
    """Get a logger handle on the process-wide state."""
    return get_state().get_logger(name)


def debug(message: str) -> None:
    get_state().debug(message)


def info(message: str) -> None:
    get_state().info(message)


def warn(message: str) -> None:
    get_state().warn(message)


warning = warn


def error(message: str | BaseException, *, exc_info: Any = None) -> None:
    get_state().error(message, exc_info=exc_info)
