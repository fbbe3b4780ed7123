"""
Presentation helpers: timestamp rendering, ANSI colors and terminal detection.
"""

import os
import sys
from datetime import datetime, timezone
from typing import Callable, Optional, TextIO, Union

from chainlog.core.levels import LogLevel

TimestampFormatter = Callable[[datetime], str]
TimestampMode = Union[str, TimestampFormatter]

TIMESTAMP_MODES = ("iso", "locale", "time", "unix")

RESET = "\033[0m"
GRAY = "\033[90m"

LEVEL_COLORS = {
    LogLevel.TRACE: "\033[90m",    # Gray
    LogLevel.DEBUG: "\033[34m",    # Blue
    LogLevel.INFO: "\033[32m",     # Green
    LogLevel.WARNING: "\033[33m",  # Yellow
    LogLevel.ERROR: "\033[31m",    # Red
    LogLevel.FATAL: "\033[35m",    # Magenta
}


def normalize_timestamp_mode(value) -> Optional[TimestampMode]:
    """
    Normalize a user supplied timestamp option.

    ``True`` means ``"iso"``; ``False``, ``None`` and the empty string disable
    timestamps. Callables and mode strings are returned unchanged.
    """
    if value is True:
        return "iso"
    if not value:
        return None
    return value


def iso_timestamp(dt: datetime) -> str:
    """UTC calendar-and-clock text with millisecond precision, e.g. ``2024-01-01T12:00:00.000Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_timestamp(dt: datetime, mode: TimestampMode) -> str:
    """
    Render a point in time according to a timestamp mode.

    Unknown mode strings fall back to ISO rendering rather than failing.

    Args:
        dt: Time to render
        mode: One of ``TIMESTAMP_MODES`` or a callable taking the datetime

    Returns:
        Rendered timestamp text
    """
    if callable(mode):
        return str(mode(dt))

    if mode == "locale":
        return dt.astimezone().strftime("%c")
    if mode == "time":
        return dt.astimezone().strftime("%X")
    if mode == "unix":
        return str(int(dt.timestamp() * 1000))
    return iso_timestamp(dt)


def colorize(text: str, color: str, enabled: bool = True) -> str:
    if not enabled or not color:
        return text
    return f"{color}{text}{RESET}"


def gray(text: str, enabled: bool = True) -> str:
    return colorize(text, GRAY, enabled)


def level_color(level: LogLevel) -> str:
    return LEVEL_COLORS.get(level, "")


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """
    Check whether ANSI colors should be written to a stream.

    ``NO_COLOR`` disables colors and ``FORCE_COLOR`` (other than ``"0"``) enables
    them regardless of the stream; otherwise colors are used only for interactive terminals.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR", "") not in ("", "0"):
        return True

    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False
