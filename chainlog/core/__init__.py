"""
Core pipeline: levels, per-call context, middleware chain, emission gate and
listener fan-out.
"""

from .levels import LogLevel, parse_level
from .context import LogContext, build_context
from .chain import Middleware, MiddlewareChain, Next
from .listeners import ListenerRegistry, LogListener
from .emission import Channel, EmissionGate, StreamSink, route, should_emit

__all__ = [
    'LogLevel',
    'parse_level',
    'LogContext',
    'build_context',
    'Middleware',
    'MiddlewareChain',
    'Next',
    'ListenerRegistry',
    'LogListener',
    'Channel',
    'EmissionGate',
    'StreamSink',
    'route',
    'should_emit',
]
