"""
Log record and severity level types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

# Source marker for records produced through the lnlog API itself
INTERNAL_SOURCE = "lnlog"


class Level(IntEnum):
    """Severity levels, numerically aligned with stdlib/structlog levels."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_name(cls, name: str) -> Level:
        """Map a level or logging method name onto a Level."""
        key = name.strip().upper()
        if key in cls.__members__:
            return cls[key]
        return _ALIASES.get(key, cls.INFO)

    @classmethod
    def from_number(cls, levelno: int) -> Level:
        """Map an arbitrary stdlib level number onto the nearest Level at or below it."""
        if levelno >= cls.ERROR:
            return cls.ERROR
        if levelno >= cls.WARN:
            return cls.WARN
        if levelno >= cls.INFO:
            return cls.INFO
        return cls.DEBUG


_ALIASES = {
    "WARNING": Level.WARN,
    "EXCEPTION": Level.ERROR,
    "CRITICAL": Level.ERROR,
    "FATAL": Level.ERROR,
}


@dataclass(frozen=True)
class LogRecord:
    """A single log call, discarded once rendered by every sink."""

    timestamp: datetime
    level: Level
    caller_tag: str
    message: str
    source: str = INTERNAL_SOURCE

    @property
    def is_internal(self) -> bool:
        return self.source == INTERNAL_SOURCE
