"""
Per-call log context.

A LogContext is created fresh for every log call, threaded through the
middleware chain, and discarded once emission and listener notification have
finished. It is never shared between calls.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from chainlog.core.levels import LogLevel


@dataclass
class LogContext:
    """
    Mutable record describing a single log call.

    Attributes:
        level: Severity of the call
        args: Positional call-site arguments; stages may replace the list or
            individual elements
        namespace: Colon-joined origin of the owning logger, if any
        formatted_message: Pre-rendered output text; when set it replaces the
            default formatting at emission
        fields: Structured key/value pairs attached by stages
    """
    level: LogLevel
    args: List[Any]
    namespace: Optional[str] = None
    formatted_message: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    _timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), repr=False
    )

    @property
    def level_name(self) -> str:
        return self.level.name

    @property
    def timestamp(self) -> datetime:
        """Creation time of the call (UTC); read-only."""
        return self._timestamp


def build_context(
    level: LogLevel,
    args: List[Any],
    namespace: Optional[str] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> LogContext:
    """
    Build the context for one log call.

    The ``args`` list is handed over as-is and becomes owned by the context.
    An empty namespace is treated as absent.

    Args:
        level: Severity of the call
        args: Call-site arguments
        namespace: Namespace of the owning logger
        clock: Optional time source, defaults to the current UTC time

    Returns:
        A new LogContext stamped with the current time
    """
    timestamp = clock() if clock else datetime.now(timezone.utc)
    return LogContext(
        level=level,
        args=args,
        namespace=namespace or None,
        _timestamp=timestamp,
    )
