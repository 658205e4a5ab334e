from __future__ import annotations

import pytest

from lnlog import core
from lnlog.config import LoggingSettings
from lnlog.records import Level


class RecordingConsole:
    """Console primitive that keeps every call for inspection."""

    def __init__(self) -> None:
        self.calls: list[tuple[Level, str, str]] = []

    def print(self, level: Level, tag: str, text: str) -> None:
        self.calls.append((level, tag, text))

    def texts(self, tag: str | None = None) -> list[str]:
        return [text for _, t, text in self.calls if tag is None or t == tag]


@pytest.fixture
def console() -> RecordingConsole:
    return RecordingConsole()


@pytest.fixture
def make_settings(tmp_path):
    """Build LoggingSettings isolated from .env files, with file paths under tmp_path."""

    def _make(**overrides) -> LoggingSettings:
        values = {
            "console_enabled": True,
            "file_enabled": False,
            "file_path_template": str(tmp_path / "ln.{index}.log"),
        }
        values.update(overrides)
        return LoggingSettings(_env_file=None, **values)

    return _make


@pytest.fixture(autouse=True)
def reset_process_state():
    """Ensure no test leaks the process-wide logger state."""
    core.shutdown()
    yield
    core.shutdown()
