"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, TYPE_CHECKING

from .console import ConsolePrimitive
from .errors import SinkInitError, SinkWriteError, report_failure
from .formatters import LineFormat
from .records import LogRecord

if TYPE_CHECKING:
    from .config import LoggingSettings


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    A sink receives text already rendered by the formatter named in
    `line_format`; the record is passed along for sinks that need its level.
    """

    name: str = "sink"
    line_format: LineFormat = "console"

    @abstractmethod
    def write(self, record: LogRecord, text: str) -> None:
        """Persist or display one rendered line."""
        ...

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


class ConsoleSink(BaseSink):
    """Hands rendered lines to the platform console primitive."""

    name = "console"
    line_format: LineFormat = "console"

    def __init__(self, console: ConsolePrimitive, tag: str = "ln"):
        self._console = console
        self._tag = tag

    def write(self, record: LogRecord, text: str) -> None:
        self._console.print(record.level, self._tag, text)


class RotatingFileSink(BaseSink):
    """Fixed ring of `max_count` files of at most `max_bytes` each.

    The ring position lives only in memory: a new process starts at index 0
    and the file at the next index is truncated on every rotation.
    """

    name = "file"
    line_format: LineFormat = "file"

    def __init__(self, path_template: str, max_bytes: int, max_count: int):
        if max_bytes <= 0 or max_count <= 0:
            raise SinkInitError(sink=self.name, reason="max_bytes and max_count must be positive")
        self._template = path_template
        self._max_bytes = max_bytes
        self._max_count = max_count
        self._index = 0
        self._bytes = 0
        self._file: IO[bytes] | None = None
        self._closed = False
        self._open(truncate=False)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_bytes(self) -> int:
        return self._bytes

    def path_for(self, index: int) -> Path:
        return Path(self._template.replace("{index}", str(index)))

    @property
    def path(self) -> Path:
        return self.path_for(self._index)

    def _open(self, *, truncate: bool) -> IO[bytes]:
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(path, "wb" if truncate else "ab")
            size = 0 if truncate else path.stat().st_size
        except OSError as e:
            self._file = None
            raise SinkInitError(sink=self.name, reason=f"{path}: {e}") from e
        self._file = handle
        self._bytes = size
        return handle

    def _rotate(self) -> IO[bytes]:
        if self._file is not None:
            self._file.close()
            self._file = None
        self._index = (self._index + 1) % self._max_count
        return self._open(truncate=True)

    def write(self, record: LogRecord, text: str) -> None:
        if self._closed:
            raise SinkWriteError(sink=self.name, reason="sink is closed")
        data = text.encode("utf-8")
        try:
            handle = self._file
            if handle is None:
                # the last rotation could not open its file; retry it
                handle = self._open(truncate=True)
            elif self._bytes > 0 and self._bytes + len(data) > self._max_bytes:
                handle = self._rotate()
            handle.write(data)
            handle.flush()
        except SinkInitError as e:
            raise SinkWriteError(sink=self.name, reason=str(e)) from e
        except OSError as e:
            raise SinkWriteError(sink=self.name, reason=f"{self.path}: {e}") from e
        self._bytes += len(data)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        self._closed = True
        if self._file is not None:
            self._file.close()
            self._file = None


# =============================================================================
# Factory
# =============================================================================


def build_sinks(settings: LoggingSettings, console: ConsolePrimitive) -> list[BaseSink]:
    """Create the enabled sinks. A sink that fails to initialise is reported and left out."""
    sinks: list[BaseSink] = []

    if settings.file_enabled:
        try:
            sinks.append(
                RotatingFileSink(
                    settings.file_path_template,
                    max_bytes=settings.max_file_bytes,
                    max_count=settings.max_file_count,
                )
            )
        except SinkInitError as e:
            report_failure(console, f"{e}; file logging disabled.")

    if settings.console_enabled:
        sinks.append(ConsoleSink(console, tag=settings.console_tag))

    return sinks
