"""
Elapsed-time formatting for the file sink.
"""

from __future__ import annotations


def format_elapsed(milliseconds: int) -> str:
    """
    Render a millisecond delta as a fixed-width, single-unit bucket.

    The largest non-zero unit wins: days, hours, minutes, seconds,
    otherwise milliseconds.

        >>> format_elapsed(500)
        '(500ms)'
        >>> format_elapsed(2500)
        '( 2sec)'
    """
    total = max(int(milliseconds), 0)
    seconds, ms = divmod(total, 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    if days > 0:
        return f"( {days:3d}d)"
    if hours > 0:
        return f"({hours:2d}hrs)"
    if minutes > 0:
        return f"({minutes:2d}min)"
    if seconds > 0:
        return f"({seconds:2d}sec)"
    return f"({ms:3d}ms)"
