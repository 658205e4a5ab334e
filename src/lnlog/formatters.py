"""
Line formatters and color utilities.

Each sink picks one formatter from a closed set; a formatter is a plain
function `(LogRecord, FormatState) -> str`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Literal

from .durations import format_elapsed
from .records import Level, LogRecord
from .tags import TagColumn

LineFormat = Literal["file", "console"]

_ONE_MS = timedelta(milliseconds=1)

# =============================================================================
# Colors
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "debug": "\033[36m",
    "info": "\033[32m",
    "warn": "\033[33m",
    "error": "\033[31m",
    "timestamp": "\033[90m",
    "tag": "\033[35m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def level_color(level: Level) -> str:
    return level.name.lower()


# =============================================================================
# Shared State
# =============================================================================


@dataclass
class FormatState:
    """Mutable state shared by the formatters of one logger."""

    tag_column: TagColumn = field(default_factory=TagColumn)
    timestamp_format: str = "%b %d, %Y %I:%M:%S %p"
    previous_timestamp: datetime = field(default_factory=datetime.now)

    def tag_for(self, record: LogRecord) -> str:
        if record.is_internal:
            return record.caller_tag
        # foreign records arrive with a bare tag
        return self.tag_column.justify(record.caller_tag)


# =============================================================================
# Formatters
# =============================================================================


def format_file_line(record: LogRecord, state: FormatState) -> str:
    """
    Render a file line, e.g.

        Aug 21, 2012 02:16:05 PM (  3ms) DEBUG app.views.index:33  log message

    The bracketed field is the time elapsed since the previous file line.
    """
    delta = record.timestamp - state.previous_timestamp
    elapsed = format_elapsed(delta // _ONE_MS)
    state.previous_timestamp = record.timestamp
    stamp = record.timestamp.strftime(state.timestamp_format)
    return f"{stamp} {elapsed} {record.level.name:>5} {state.tag_for(record)} {record.message}\n"


def format_console_line(record: LogRecord, state: FormatState) -> str:
    """Render a console line; the console primitive adds its own timestamp."""
    return f"{state.tag_for(record)} {record.message}"


FORMATTERS: dict[str, Callable[[LogRecord, FormatState], str]] = {
    "file": format_file_line,
    "console": format_console_line,
}
