"""
OpenTelemetry trace correlation stage.
"""

from opentelemetry import trace

from chainlog.core.chain import Middleware, Next
from chainlog.core.context import LogContext


def trace_context_middleware() -> Middleware:
    """
    Attach the active span's ids to ``ctx.fields``.

    Adds ``trace_id`` (32 hex digits) and ``span_id`` (16 hex digits) when a
    recording span is current. Ids already present on the context are kept.
    """

    def add_trace_context(ctx: LogContext, call_next: Next) -> None:
        span = trace.get_current_span()
        if span and span.is_recording():
            span_context = span.get_span_context()
            ctx.fields.setdefault("trace_id", format(span_context.trace_id, "032x"))
            ctx.fields.setdefault("span_id", format(span_context.span_id, "016x"))
        call_next()

    return add_trace_context
