"""Stateless rendering helpers used at emission time."""

from .inspect import format_args, format_exception, inspect_value
from .presentation import (
    TIMESTAMP_MODES,
    format_timestamp,
    normalize_timestamp_mode,
    supports_color,
)

__all__ = [
    'format_args',
    'format_exception',
    'inspect_value',
    'TIMESTAMP_MODES',
    'format_timestamp',
    'normalize_timestamp_mode',
    'supports_color',
]
