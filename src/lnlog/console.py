"""
Platform console primitive.
"""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from typing import Any, Protocol

from .formatters import colorize, level_color
from .records import Level


class ConsolePrimitive(Protocol):
    """Native console output: `print(severity, tag, text)`, timestamped by the platform."""

    def print(self, level: Level, tag: str, text: str) -> None: ...


class StreamConsole:
    """Console primitive writing `HH:MM:SS.mmm L/tag: text` lines to a stream.

    Args:
        stream: Output stream (default: stderr, resolved at write time)
        use_color: Force ANSI colors on or off (default: only on a TTY)
    """

    def __init__(self, stream: Any = None, use_color: bool | None = None):
        self._stream = stream
        self._use_color = use_color
        self._lock = threading.Lock()

    @property
    def stream(self) -> Any:
        return self._stream or sys.stderr

    def print(self, level: Level, tag: str, text: str) -> None:
        stream = self.stream
        use_color = self._use_color
        if use_color is None:
            use_color = bool(getattr(stream, "isatty", lambda: False)())

        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        prefix = f"{level.name[0]}/{tag}:"
        if use_color:
            stamp = colorize(stamp, "timestamp")
            prefix = colorize(prefix, level_color(level))

        body = text.rstrip("\n")
        line = f"{stamp} {prefix} {body}\n"
        with self._lock:
            stream.write(line)
            stream.flush()
