"""
Stream console primitive tests.
"""

from __future__ import annotations

import io
import re

from lnlog.console import StreamConsole
from lnlog.errors import SinkWriteError, report_failure
from lnlog.records import Level


class TestStreamConsole:
    def test_line_layout(self) -> None:
        stream = io.StringIO()
        StreamConsole(stream, use_color=False).print(Level.INFO, "ln", "app.views:33  hello\n")
        assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3} I/ln: app\.views:33  hello\n", stream.getvalue())

    def test_plain_when_not_a_tty(self) -> None:
        stream = io.StringIO()
        StreamConsole(stream).print(Level.ERROR, "ln", "x")
        assert "\033[" not in stream.getvalue()

    def test_colored_on_request(self) -> None:
        stream = io.StringIO()
        StreamConsole(stream, use_color=True).print(Level.ERROR, "ln", "x")
        assert "\033[31mE/ln:" in stream.getvalue()


class TestReportFailure:
    def test_reports_on_error_channel(self, console) -> None:
        report_failure(console, str(SinkWriteError(sink="file", reason="disk full")))
        assert console.calls == [(Level.ERROR, "lnlog", "Sink 'file' failed to write: disk full")]

    def test_appends_traceback(self, console) -> None:
        try:
            raise OSError("gone")
        except OSError as exc:
            report_failure(console, "Sink 'file' failed.", exc)
        assert "OSError: gone" in console.calls[0][2]
