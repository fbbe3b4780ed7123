"""
Argument inspection for log output.

Turns arbitrary call-site values into readable text. Top-level strings are
written verbatim; everything else is rendered recursively with depth and length
limits:

    >>> format_args(["Object:", {"a": 1, "b": {"c": 2}}])
    "Object: { a: 1, b: { c: 2 } }"
"""

import re
import traceback
import types
from collections.abc import Mapping, Set
from datetime import date, datetime, time
from typing import Any, List, Sequence

from chainlog.formatting.presentation import colorize, iso_timestamp

# Colors per value kind
STRING_COLOR = "\033[32m"
NUMBER_COLOR = "\033[33m"
NONE_COLOR = "\033[1m"
SPECIAL_COLOR = "\033[36m"
DATE_COLOR = "\033[35m"
ERROR_COLOR = "\033[31m"

ELIDED = "[Object]"

_FUNCTION_TYPES = (types.FunctionType, types.BuiltinFunctionType, types.MethodType)


def format_args(
    args: Sequence[Any],
    depth: int = 4,
    max_array_length: int = 100,
    colors: bool = False,
) -> str:
    """
    Render call-site arguments as a single line of text.

    Args:
        args: Values passed to the log call
        depth: Nesting depth beyond which structures are elided
        max_array_length: Maximum number of items or entries shown per container
        colors: Whether to add ANSI colors

    Returns:
        Space-joined rendering of the arguments
    """
    if not args:
        return ""

    inspector = _Inspector(depth, max_array_length, colors)
    return " ".join(
        arg if isinstance(arg, str) else inspector.inspect(arg, 0)
        for arg in args
    )


def inspect_value(value: Any, depth: int = 4, max_array_length: int = 100, colors: bool = False) -> str:
    """Render a single value the way it appears nested inside a structure."""
    return _Inspector(depth, max_array_length, colors).inspect(value, 0)


def format_exception(error: BaseException) -> str:
    """Traceback text if the exception was raised, else ``Name: message``."""
    if error.__traceback__ is not None:
        return "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ).rstrip()
    return f"{type(error).__name__}: {error}"


class _Inspector:

    def __init__(self, depth: int, max_array_length: int, colors: bool):
        self.depth = depth
        self.max_array_length = max_array_length
        self.colors = colors

    def _paint(self, text: str, color: str) -> str:
        return colorize(text, color, self.colors)

    def inspect(self, value: Any, level: int) -> str:
        if value is None:
            return self._paint("None", NONE_COLOR)
        if isinstance(value, str):
            return self._paint(f"'{value}'", STRING_COLOR)
        if isinstance(value, (bool, int, float, complex)):
            return self._paint(str(value), NUMBER_COLOR)
        if isinstance(value, (bytes, bytearray)):
            return self._paint(repr(value), STRING_COLOR)
        if isinstance(value, datetime):
            return self._paint(iso_timestamp(value) if value.tzinfo else value.isoformat(), DATE_COLOR)
        if isinstance(value, (date, time)):
            return self._paint(value.isoformat(), DATE_COLOR)
        if isinstance(value, re.Pattern):
            return self._paint(f"re.compile({value.pattern!r})", ERROR_COLOR)
        if isinstance(value, BaseException):
            return self._paint(format_exception(value), ERROR_COLOR)
        if isinstance(value, type):
            return self._paint(f"[class {value.__name__}]", SPECIAL_COLOR)
        if isinstance(value, _FUNCTION_TYPES):
            name = getattr(value, "__name__", None) or "anonymous"
            return self._paint(f"[Function: {name}]", SPECIAL_COLOR)

        # scalars above are always shown; containers past the depth limit are not
        if level > self.depth:
            return self._paint(ELIDED, SPECIAL_COLOR)
        if isinstance(value, Mapping):
            return self._inspect_mapping(value, level, prefix="")
        if isinstance(value, (list, tuple, Set, frozenset)):
            return self._inspect_sequence(list(value), level)
        if hasattr(value, "__dict__"):
            return self._inspect_mapping(vars(value), level, prefix=f"{type(value).__name__} ")
        return str(value)

    def _inspect_sequence(self, items: List[Any], level: int) -> str:
        if not items:
            return "[]"

        rendered = [self.inspect(item, level + 1) for item in items[:self.max_array_length]]
        hidden = len(items) - self.max_array_length
        if hidden > 0:
            rendered.append(f"... {hidden} more items")

        if level > 0 and len(rendered) > 3:
            return "[\n  " + ",\n  ".join(rendered) + "\n]"
        return "[ " + ", ".join(rendered) + " ]"

    def _inspect_mapping(self, mapping: Mapping, level: int, prefix: str) -> str:
        entries = list(mapping.items())
        if not entries:
            return f"{prefix}{{}}"

        props = [
            f"{key}: {self.inspect(val, level + 1)}"
            for key, val in entries[:self.max_array_length]
        ]
        hidden = len(entries) - self.max_array_length
        if hidden > 0:
            props.append(f"... {hidden} more properties")

        if level > 0 and len(props) > 2:
            return prefix + "{\n  " + ",\n  ".join(props) + "\n}"
        return prefix + "{ " + ", ".join(props) + " }"
