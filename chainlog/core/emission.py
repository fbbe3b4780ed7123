"""
Emission gate and output channels.

The gate decides, once a context has made it through the middleware chain,
whether it is written out. Output is routed to one of three channels by
severity; the routing is fixed and not configurable per logger.
"""

import sys
from enum import Enum
from typing import Callable, Optional, TextIO

from chainlog.core.context import LogContext
from chainlog.core.levels import LogLevel
from chainlog.core.listeners import ListenerRegistry
from chainlog.infrastructure.diagnostics import LazyLogger

logger = LazyLogger(__name__)


class Channel(str, Enum):
    DEFAULT = "default"
    WARNING = "warning"
    ERROR = "error"


def route(level: LogLevel) -> Channel:
    """Output channel for a level: ERROR and above, WARNING, or everything else."""
    if level >= LogLevel.ERROR:
        return Channel.ERROR
    if level == LogLevel.WARNING:
        return Channel.WARNING
    return Channel.DEFAULT


def should_emit(level: LogLevel, threshold: LogLevel) -> bool:
    return level >= threshold and threshold < LogLevel.SILENT


class StreamSink:
    """
    Writes emitted text to text streams, one per channel.

    Streams that are not given explicitly are looked up at write time:
    ``sys.stdout`` for the default channel and ``sys.stderr`` for warnings and
    errors.
    """

    def __init__(
        self,
        default: Optional[TextIO] = None,
        warning: Optional[TextIO] = None,
        error: Optional[TextIO] = None,
    ):
        self._streams = {
            Channel.DEFAULT: default,
            Channel.WARNING: warning,
            Channel.ERROR: error,
        }

    def stream_for(self, channel: Channel) -> TextIO:
        stream = self._streams[channel]
        if stream is not None:
            return stream
        return sys.stdout if channel is Channel.DEFAULT else sys.stderr

    def write(self, channel: Channel, text: str) -> None:
        stream = self.stream_for(channel)
        stream.write(text + "\n")
        stream.flush()


class EmissionGate:
    """
    Final step of a log call.

    Applies the level/silence predicate, resolves the output text, writes it to
    the sink and notifies listeners.
    """

    def __init__(self, sink, listeners: ListenerRegistry):
        self.sink = sink
        self.listeners = listeners

    def emit(
        self,
        ctx: LogContext,
        threshold: LogLevel,
        render: Callable[[LogContext], str],
    ) -> bool:
        """
        Emit a context if it passes the gate.

        Args:
            ctx: Context that survived the middleware chain
            threshold: Current level threshold of the logger
            render: Default formatter, used when no stage set formatted_message

        Returns:
            True if the context was emitted, False if it was suppressed or
            could not be rendered
        """
        if not should_emit(ctx.level, threshold):
            return False

        if ctx.formatted_message is None:
            try:
                ctx.formatted_message = render(ctx)
            except Exception:
                logger.error(
                    "render_failed",
                    log_level=ctx.level_name,
                    namespace=ctx.namespace,
                    exc_info=True,
                )
                return False

        try:
            self.sink.write(route(ctx.level), ctx.formatted_message)
        except Exception:
            logger.error(
                "sink_write_failed",
                log_level=ctx.level_name,
                namespace=ctx.namespace,
                exc_info=True,
            )

        self.listeners.notify(ctx)
        return True
