"""
Built-in middleware stages.

Every stage is an ordinary ``stage(ctx, call_next)`` callable; the chain does
not treat any of them specially.
"""

from .batch import BatchMiddleware, batch_middleware
from .filters import (
    SamplingMiddleware,
    ThrottleMiddleware,
    conditional_middleware,
    filter_level,
    sampling_middleware,
    throttle_middleware,
)
from .render import JSONMiddleware, json_middleware
from .tracing import trace_context_middleware
from .transform import (
    REDACTED,
    RedactMiddleware,
    error_stack_middleware,
    prefix_middleware,
    redact_middleware,
    suffix_middleware,
)

__all__ = [
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

    'BatchMiddleware',
    'JSONMiddleware',
    'RedactMiddleware',
    'SamplingMiddleware',
    'ThrottleMiddleware',
    'REDACTED',
]
