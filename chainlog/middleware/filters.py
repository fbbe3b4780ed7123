"""
Suppressing stages: level floor, sampling, throttling and conditional wrapping.

These stages drop a message simply by not calling ``call_next``.
"""

import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional, Tuple

from chainlog.core.chain import Middleware, Next
from chainlog.core.context import LogContext
from chainlog.core.levels import LevelLike, parse_level
from chainlog.exceptions import ConfigurationError


def filter_level(min_level: LevelLike) -> Middleware:
    """Only let through messages at ``min_level`` or above."""
    floor = parse_level(min_level)

    def level_filter(ctx: LogContext, call_next: Next) -> None:
        if ctx.level >= floor:
            call_next()

    return level_filter


class SamplingMiddleware:
    """Let through a random fraction ``rate`` of messages."""

    def __init__(self, rate: float, rng: Optional[random.Random] = None):
        if isinstance(rate, bool) or not 0.0 <= rate <= 1.0:
            raise ConfigurationError(
                "Sampling rate must be between 0 and 1",
                context={"rate": rate}
            )
        self.rate = rate
        self._rng = rng or random.Random()

    def __call__(self, ctx: LogContext, call_next: Next) -> None:
        if self._rng.random() < self.rate:
            call_next()


def sampling_middleware(rate: float, rng: Optional[random.Random] = None) -> SamplingMiddleware:
    return SamplingMiddleware(rate, rng)


@dataclass
class _Window:
    count: int
    reset_at: float


class ThrottleMiddleware:
    """
    Allow at most ``limit`` messages per ``interval`` seconds for each key.

    The key is the message level plus its first argument. A key's window opens
    with the first message seen for it and lasts ``interval`` seconds; once it
    has passed, the next message opens a fresh window. Expired windows are
    pruned at most once per interval.
    """

    def __init__(
        self,
        limit: int,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigurationError(
                "Throttle limit must be a positive integer",
                context={"limit": limit}
            )
        if interval <= 0:
            raise ConfigurationError(
                "Throttle interval must be positive",
                context={"interval": interval}
            )
        self.limit = limit
        self.interval = interval
        self._clock = clock
        self._windows: Dict[Tuple[int, Hashable], _Window] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    @staticmethod
    def key_for(ctx: LogContext) -> Tuple[int, str]:
        first = ctx.args[0] if ctx.args else None
        return int(ctx.level), str(first)

    def allow(self, key: Tuple[int, Hashable]) -> bool:
        now = self._clock()
        with self._lock:
            if now - self._last_cleanup >= self.interval:
                self._cleanup(now)

            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.interval)
                return True
            if window.count < self.limit:
                window.count += 1
                return True
            return False

    def _cleanup(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]
        self._last_cleanup = now

    def __call__(self, ctx: LogContext, call_next: Next) -> None:
        if self.allow(self.key_for(ctx)):
            call_next()


def throttle_middleware(
    limit: int,
    interval: float,
    clock: Callable[[], float] = time.monotonic,
) -> ThrottleMiddleware:
    """
    Rate limit repeated messages.

    Args:
        limit: Messages allowed per window for one key
        interval: Window length in seconds
        clock: Monotonic time source in seconds
    """
    return ThrottleMiddleware(limit, interval, clock)


def conditional_middleware(
    condition: Callable[[LogContext], bool],
    middleware: Middleware,
) -> Middleware:
    """Run ``middleware`` only for contexts matching ``condition``; pass the rest through."""
    if not callable(condition) or not callable(middleware):
        raise ConfigurationError("Condition and middleware must be callable")

    def conditional(ctx: LogContext, call_next: Next) -> None:
        if condition(ctx):
            middleware(ctx, call_next)
        else:
            call_next()

    return conditional
