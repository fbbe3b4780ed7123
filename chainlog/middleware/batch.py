"""
Batching stage.

Collects contexts and hands them to a flush callback in groups, either when
``max_size`` contexts have accumulated or ``max_wait`` seconds after the first
context of a batch arrived. Batching never suppresses normal emission: every
context continues down the chain.
"""

import threading
from typing import Callable, List, Optional

from chainlog.core.chain import Next
from chainlog.core.context import LogContext
from chainlog.exceptions import ConfigurationError
from chainlog.infrastructure.diagnostics import LazyLogger

FlushCallback = Callable[[List[LogContext]], None]

logger = LazyLogger(__name__)


class BatchMiddleware:
    """
    Size/time windowed batching.

    The time-based flush runs on a daemon timer thread, so ``on_flush`` may be
    called from that thread. Call ``close()`` to flush what is left and stop
    the timer.
    """

    def __init__(self, max_size: int, max_wait: float, on_flush: FlushCallback):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
            raise ConfigurationError(
                "Batch max_size must be a positive integer",
                context={"max_size": max_size}
            )
        if max_wait <= 0:
            raise ConfigurationError(
                "Batch max_wait must be positive",
                context={"max_wait": max_wait}
            )
        if not callable(on_flush):
            raise ConfigurationError("Batch on_flush must be callable")

        self.max_size = max_size
        self.max_wait = max_wait
        self.on_flush = on_flush
        self._batch: List[LogContext] = []
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def __call__(self, ctx: LogContext, call_next: Next) -> None:
        with self._lock:
            self._batch.append(ctx)
            full = len(self._batch) >= self.max_size
            if not full and self._timer is None:
                self._start_timer()

        if full:
            self._safe_flush()

        call_next()

    def _start_timer(self) -> None:
        self._timer = threading.Timer(self.max_wait, self._safe_flush)
        self._timer.daemon = True
        self._timer.start()

    def _drain(self) -> List[LogContext]:
        with self._lock:
            batch, self._batch = self._batch, []
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        return batch

    def _safe_flush(self) -> None:
        """Flush without raising; a failing ``on_flush`` is reported and the batch discarded."""
        batch = self._drain()
        if not batch:
            return
        try:
            self.on_flush(batch)
        except Exception:
            logger.error("batch_flush_failed", batch_size=len(batch), exc_info=True)

    def flush(self) -> None:
        """Hand the pending contexts to ``on_flush`` and start a new batch."""
        batch = self._drain()
        if batch:
            self.on_flush(batch)

    def close(self) -> None:
        self.flush()

    @property
    def pending(self) -> int:
        return len(self._batch)


def batch_middleware(max_size: int, max_wait: float, on_flush: FlushCallback) -> BatchMiddleware:
    """
    Create a batching stage.

    Args:
        max_size: Flush once this many contexts are pending
        max_wait: Flush this many seconds after a batch was started
        on_flush: Receives the list of batched contexts
    """
    return BatchMiddleware(max_size, max_wait, on_flush)
