"""
Stdlib logging interception tests.
"""

from __future__ import annotations

import logging

import pytest

from lnlog.core import LoggerState
from lnlog.interceptors import LnHandler, install_stdlib_handler, remove_stdlib_handler
from lnlog.records import Level


@pytest.fixture
def stdlib_logger():
    logger = logging.getLogger("app.payments")
    logger.propagate = False
    yield logger
    remove_stdlib_handler(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestLnHandler:
    def test_routes_records_to_sinks(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(), console=console)
        install_stdlib_handler(state, stdlib_logger)

        stdlib_logger.warning("card declined for %s", "order-7")

        assert len(console.calls) == 1
        level, tag, text = console.calls[0]
        assert level is Level.WARN
        assert tag == "ln"
        assert text.startswith("app.payments:")
        assert text.endswith("card declined for order-7")

    def test_foreign_tags_share_the_column(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(), console=console)
        install_stdlib_handler(state, stdlib_logger)

        state.get_logger("a-much-longer-component-tag").info("first")
        stdlib_logger.info("second")

        first, second = console.texts()
        assert first.index("first") == second.index("second")

    def test_respects_minimum_level(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(level="WARN"), console=console)
        install_stdlib_handler(state, stdlib_logger)
        stdlib_logger.setLevel(logging.DEBUG)

        stdlib_logger.info("ignored")
        stdlib_logger.error("kept")

        assert [lvl for lvl, _, _ in console.calls] == [Level.ERROR]

    def test_stdlib_levels_map_onto_nearest(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(), console=console)
        install_stdlib_handler(state, stdlib_logger)
        stdlib_logger.setLevel(1)

        stdlib_logger.critical("down")
        stdlib_logger.log(5, "very verbose")

        assert [lvl for lvl, _, _ in console.calls] == [Level.ERROR, Level.DEBUG]

    def test_exception_text_included(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(), console=console)
        install_stdlib_handler(state, stdlib_logger)

        try:
            raise ZeroDivisionError("division by zero")
        except ZeroDivisionError:
            stdlib_logger.exception("charge failed")

        _, _, text = console.calls[0]
        assert "charge failed" in text
        assert "ZeroDivisionError: division by zero" in text

    def test_own_loggers_are_ignored(self, make_settings, console) -> None:
        state = LoggerState(make_settings(), console=console)
        handler = LnHandler(state)

        record = logging.LogRecord("lnlog.sinks", logging.ERROR, __file__, 1, "loop", None, None)
        handler.emit(record)

        assert console.calls == []

    def test_install_twice_does_not_duplicate(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(), console=console)
        install_stdlib_handler(state, stdlib_logger)
        install_stdlib_handler(state, stdlib_logger)

        stdlib_logger.info("once")

        assert len(console.calls) == 1
        assert sum(isinstance(h, LnHandler) for h in stdlib_logger.handlers) == 1

    def test_install_sets_logger_level(self, make_settings, console, stdlib_logger) -> None:
        state = LoggerState(make_settings(level="ERROR"), console=console)
        install_stdlib_handler(state, stdlib_logger)
        assert stdlib_logger.level == logging.ERROR
