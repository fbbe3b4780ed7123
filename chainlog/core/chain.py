"""
Middleware chain.

Runs an ordered sequence of stages against one LogContext. Every stage is a
callable ``stage(ctx, call_next)``: it may read or mutate the context, then
either call ``call_next()`` to hand control to the next stage (or to the
terminal step once no stages remain) or return without calling it, which ends
the traversal. Not calling ``call_next`` is how filters, samplers and throttles
suppress a message; it is never treated as an error.

Continuations are bound to a position and are one-shot. The continuation given
to stage *i* always resumes at stage *i + 1*; calling it a second time is
ignored and reported as a warning, so each context is emitted at most once.

A stage that raises is caught at the point where it was invoked. The failure is
reported through the diagnostics logger, the traversal stops there, and the
exception never reaches the caller of the log method.
"""

from typing import Callable, Sequence

from chainlog.core.context import LogContext
from chainlog.exceptions import MiddlewareError
from chainlog.infrastructure.diagnostics import LazyLogger

Next = Callable[[], None]
Middleware = Callable[[LogContext, Next], None]
Terminal = Callable[[LogContext], None]

logger = LazyLogger(__name__)


def stage_name(stage) -> str:
    """Human readable identity of a stage for diagnostics."""
    name = getattr(stage, "__qualname__", None)
    if name:
        return name
    return type(stage).__name__


class MiddlewareChain:
    """
    Ordered, immutable sequence of middleware stages.

    A chain is built from a snapshot of a logger's stage list, so stages added
    to the logger during a traversal do not affect that traversal.
    """

    def __init__(self, stages: Sequence[Middleware]):
        self.stages = tuple(stages)

    def __len__(self) -> int:
        return len(self.stages)

    def run(self, ctx: LogContext, terminal: Terminal) -> None:
        """
        Run all stages against ``ctx`` and then ``terminal``.

        Args:
            ctx: Context of the current log call
            terminal: Called with ``ctx`` once the last stage continues
        """
        if not self.stages:
            terminal(ctx)
            return

        self._continuation(ctx, terminal, 0)()

    def _continuation(self, ctx: LogContext, terminal: Terminal, position: int) -> Next:
        called = False

        def call_next() -> None:
            nonlocal called
            if called:
                logger.warning(
                    "continuation_called_twice",
                    stage=stage_name(self.stages[position - 1]) if position else None,
                    position=position,
                    log_level=ctx.level_name,
                    namespace=ctx.namespace,
                )
                return
            called = True

            if position >= len(self.stages):
                terminal(ctx)
                return

            stage = self.stages[position]
            try:
                stage(ctx, self._continuation(ctx, terminal, position + 1))
            except Exception as e:
                self._report_failure(ctx, stage, position, e)

        return call_next

    @staticmethod
    def _report_failure(ctx: LogContext, stage, position: int, error: Exception) -> None:
        name = stage_name(stage)
        failure = MiddlewareError(
            name,
            position,
            error,
            context={"log_level": ctx.level_name, "namespace": ctx.namespace},
        )
        logger.error(
            "middleware_failed",
            stage=name,
            position=position,
            log_level=ctx.level_name,
            namespace=ctx.namespace,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=failure,
        )
