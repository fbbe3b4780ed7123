"""
chainlog: leveled logging with a middleware pipeline

A log call becomes a LogContext that is passed synchronously through the
logger's ordered middleware stages. Each stage may rewrite the context and then
either continue the chain or stop it. Contexts that reach the end are emitted
if they pass the level threshold, after which listeners are notified.

Components:
- core: levels, context builder, middleware chain, emission gate, listeners
- logger: the public Logger with child derivation
- middleware: built-in stages (filters, throttling, batching, JSON, redaction)
- formatting: argument inspection and presentation helpers
- config: environment-backed default settings
"""

from .core import LogContext, LogLevel, StreamSink, Channel
from .logger import Logger
from .exceptions import ChainlogError, ConfigurationError, MiddlewareError
from .middleware import (
    batch_middleware,
    conditional_middleware,
    error_stack_middleware,
    filter_level,
    json_middleware,
    prefix_middleware,
    redact_middleware,
    sampling_middleware,
    suffix_middleware,
    throttle_middleware,
    trace_context_middleware,
)
from .formatting import format_args, supports_color

__version__ = "0.1.0"

__all__ = [
    'Logger',
    'LogLevel',
    'LogContext',
    'StreamSink',
    'Channel',

    'ChainlogError',
    'ConfigurationError',
    'MiddlewareError',

    'filter_level',
    'prefix_middleware',
    'suffix_middleware',
    'throttle_middleware',
    'sampling_middleware',
    'batch_middleware',
    'error_stack_middleware',
    'json_middleware',
    'redact_middleware',
    'conditional_middleware',
    'trace_context_middleware',

    'format_args',
    'supports_color',
]
