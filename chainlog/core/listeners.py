"""
Listener fan-out.

Listeners are independent observers notified with the finished LogContext
after every emission that passes the gate.
"""

from typing import Callable, Iterator, List, Optional

from chainlog.core.context import LogContext
from chainlog.exceptions import ConfigurationError
from chainlog.infrastructure.diagnostics import LazyLogger

LogListener = Callable[[LogContext], None]

logger = LazyLogger(__name__)


class ListenerRegistry:
    """
    Ordered collection of listener callbacks.

    Removal rebuilds the backing list, and notification iterates a snapshot, so
    changes made while a fan-out is in flight only affect later emissions.
    """

    def __init__(self, listeners: Optional[List[LogListener]] = None):
        self._listeners: List[LogListener] = list(listeners or [])

    def add(self, listener: LogListener) -> None:
        if not callable(listener):
            raise ConfigurationError(
                "Listener must be callable",
                context={"listener": repr(listener)}
            )
        self._listeners.append(listener)

    def remove(self, listener: LogListener) -> None:
        """Remove every registration of ``listener`` (compared by identity)."""
        self._listeners = [l for l in self._listeners if l is not listener]

    def notify(self, ctx: LogContext) -> None:
        """
        Call each registered listener once, in registration order.

        A listener that raises is reported and skipped; the remaining listeners
        are still called.
        """
        for listener in tuple(self._listeners):
            try:
                listener(ctx)
            except Exception:
                logger.error(
                    "listener_failed",
                    listener=_callable_name(listener),
                    log_level=ctx.level_name,
                    namespace=ctx.namespace,
                    exc_info=True,
                )

    def copy(self) -> "ListenerRegistry":
        return ListenerRegistry(self._listeners)

    def __iter__(self) -> Iterator[LogListener]:
        return iter(tuple(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)


def _callable_name(fn) -> str:
    return getattr(fn, "__qualname__", None) or type(fn).__name__
