"""
Log severity levels.

Levels are ordered ``TRACE < DEBUG < INFO < WARNING < ERROR < FATAL < SILENT``.
``SILENT`` is only meaningful as a threshold: setting a logger's threshold to it
disables all output, and no message is ever emitted at that level.
"""

from enum import IntEnum
from typing import Union

from chainlog.exceptions import ConfigurationError


class LogLevel(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5
    SILENT = 6


LevelLike = Union[LogLevel, int, str]

_ALIASES = {
    "WARN": LogLevel.WARNING,
    "CRITICAL": LogLevel.FATAL,
}


def parse_level(value: LevelLike) -> LogLevel:
    """
    Convert a level given as an enum member, integer or name into a LogLevel.

    Names are case-insensitive and ``"warn"``/``"critical"`` are accepted as
    aliases for WARNING and FATAL.

    Raises:
        ConfigurationError: If the value does not name a known level
    """
    if isinstance(value, LogLevel):
        return value

    if isinstance(value, bool):
        raise ConfigurationError(
            f"Invalid log level: {value!r}",
            context={"level": value}
        )

    if isinstance(value, int):
        try:
            return LogLevel(value)
        except ValueError:
            raise ConfigurationError(
                f"Invalid log level: {value!r}",
                context={"level": value}
            ) from None

    if isinstance(value, str):
        name = value.strip().upper()
        if name in _ALIASES:
            return _ALIASES[name]
        if name in LogLevel.__members__:
            return LogLevel[name]

    raise ConfigurationError(
        f"Invalid log level: {value!r}",
        context={"level": value}
    )
