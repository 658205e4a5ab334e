"""
Elapsed-time bucket tests.
"""

from __future__ import annotations

import pytest

from lnlog.durations import format_elapsed

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR


class TestFormatElapsedBuckets:
    def test_milliseconds(self) -> None:
        assert format_elapsed(500) == "(500ms)"

    def test_zero(self) -> None:
        assert format_elapsed(0) == "(  0ms)"

    def test_seconds(self) -> None:
        assert format_elapsed(2500) == "( 2sec)"

    def test_minutes(self) -> None:
        assert format_elapsed(65_000) == "( 1min)"

    def test_hours(self) -> None:
        assert format_elapsed(3_661_000) == "( 1hrs)"

    def test_days(self) -> None:
        assert format_elapsed(90_000_000) == "(   1d)"

    def test_negative_delta_clamps_to_zero(self) -> None:
        assert format_elapsed(-42) == "(  0ms)"


class TestFormatElapsedPriority:
    """The largest non-zero unit wins; smaller remainders are dropped."""

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [
            (DAY + HOUR + MINUTE + SECOND + 1, "(   1d)"),
            (2 * HOUR + 59 * MINUTE, "( 2hrs)"),
            (59 * MINUTE + 59 * SECOND + 999, "(59min)"),
            (59 * SECOND + 999, "(59sec)"),
            (999, "(999ms)"),
        ],
    )
    def test_single_bucket(self, ms: int, expected: str) -> None:
        assert format_elapsed(ms) == expected

    def test_fixed_width_for_small_values(self) -> None:
        samples = [7, 999, 3 * SECOND, 12 * MINUTE, 23 * HOUR, 5 * DAY, 365 * DAY]
        assert {len(format_elapsed(ms)) for ms in samples} == {7}
