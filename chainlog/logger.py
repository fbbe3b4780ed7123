"""
chainlog Logger

The public logger: builds a context per call, runs it through the logger's
middleware chain, and hands survivors to the emission gate.

Example:
    >>> from chainlog import Logger, LogLevel, prefix_middleware
    >>> log = Logger(level=LogLevel.INFO, namespace="app")
    >>> log.use(prefix_middleware("[api]"))
    >>> db = log.child("db")
    >>> db.info("connected", {"pool": 4})
    [app:db] [INFO] [api] connected { pool: 4 }
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from chainlog.config.settings import LoggerSettings, get_settings
from chainlog.core.chain import Middleware, MiddlewareChain
from chainlog.core.context import LogContext, build_context
from chainlog.core.emission import Channel, EmissionGate, StreamSink
from chainlog.core.levels import LevelLike, LogLevel, parse_level
from chainlog.core.listeners import ListenerRegistry, LogListener
from chainlog.exceptions import ConfigurationError
from chainlog.formatting.inspect import format_args, inspect_value
from chainlog.formatting.presentation import (
    TimestampMode,
    colorize,
    format_timestamp,
    gray,
    level_color,
    normalize_timestamp_mode,
    supports_color,
)


class Logger:
    """
    Leveled logger with a middleware pipeline and listeners.

    Every logger owns its stage list and listener registry. ``child()`` copies
    both at the moment it is called; afterwards parent and child evolve
    independently.

    Attributes:
        namespace: Colon-joined origin label, or None
        middleware: Snapshot of the registered stages
        listeners: Snapshot of the registered listeners
    """

    def __init__(
        self,
        level: Optional[LevelLike] = None,
        namespace: Optional[str] = None,
        colors: Optional[bool] = None,
        timestamp: Any = None,
        depth: Optional[int] = None,
        max_array_length: Optional[int] = None,
        sink=None,
        settings: Optional[LoggerSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Create a logger.

        Options left as None take their value from ``settings`` (by default the
        process-wide LoggerSettings loaded from the environment).

        Args:
            level: Level threshold; a LogLevel, its value or its name
            namespace: Origin label shown in output
            colors: Enable ANSI colors; auto-detected when unset everywhere
            timestamp: ``True``, a mode name, a callable, or ``False`` to disable
            depth: Nesting depth for argument inspection
            max_array_length: Items shown per container during inspection
            sink: Output sink with ``write(channel, text)``; defaults to
                stdout/stderr
            settings: Settings used for unspecified options
            clock: Time source for context timestamps

        Raises:
            ConfigurationError: If an option is invalid
        """
        self._settings = settings or get_settings()
        self._sink = sink if sink is not None else StreamSink()
        self._clock = clock
        self._namespace = namespace or None

        self._level = parse_level(level if level is not None else self._settings.level)
        self._timestamp = normalize_timestamp_mode(
            timestamp if timestamp is not None else self._settings.timestamp
        )
        self._depth = _validate_size(
            "depth", depth if depth is not None else self._settings.depth
        )
        self._max_array_length = _validate_size(
            "max_array_length",
            max_array_length if max_array_length is not None else self._settings.max_array_length,
        )

        if colors is None:
            colors = self._settings.colors
        if colors is None:
            colors = self._detect_colors()
        self._colors = bool(colors)

        self._middleware: List[Middleware] = []
        self._listeners = ListenerRegistry()
        self._gate = EmissionGate(self._sink, self._listeners)

    def _detect_colors(self) -> bool:
        stream_for = getattr(self._sink, "stream_for", None)
        if stream_for is None:
            return False
        return supports_color(stream_for(Channel.DEFAULT))

    # ------------------------------------------------------------------
    # Log calls
    # ------------------------------------------------------------------

    def log(self, level: LevelLike, *args: Any) -> None:
        """
        Log at an explicit level.

        Raises:
            ConfigurationError: If ``level`` is invalid or SILENT
        """
        level = parse_level(level)
        if level is LogLevel.SILENT:
            raise ConfigurationError(
                "SILENT is a threshold level and cannot be logged at",
                context={"level": level.name}
            )
        self._dispatch(level, list(args))

    def trace(self, *args: Any) -> None:
        self._dispatch(LogLevel.TRACE, list(args))

    def debug(self, *args: Any) -> None:
        self._dispatch(LogLevel.DEBUG, list(args))

    def info(self, *args: Any) -> None:
        self._dispatch(LogLevel.INFO, list(args))

    def warning(self, *args: Any) -> None:
        self._dispatch(LogLevel.WARNING, list(args))

    warn = warning

    def error(self, *args: Any) -> None:
        self._dispatch(LogLevel.ERROR, list(args))

    def fatal(self, *args: Any) -> None:
        self._dispatch(LogLevel.FATAL, list(args))

    def _dispatch(self, level: LogLevel, args: List[Any]) -> None:
        ctx = build_context(level, args, self._namespace, self._clock)

        if not self._middleware:
            self._emit(ctx)
            return

        MiddlewareChain(self._middleware).run(ctx, self._emit)

    def _emit(self, ctx: LogContext) -> None:
        self._gate.emit(ctx, self._level, self.render)

    def render(self, ctx: LogContext) -> str:
        """
        Default text rendering of a context.

        ``[timestamp] [namespace] [LEVEL] args key=value``, with the timestamp
        and namespace segments omitted when unset.
        """
        parts = []

        if self._timestamp:
            stamp = format_timestamp(ctx.timestamp, self._timestamp)
            parts.append(gray(f"[{stamp}]", self._colors))

        if ctx.namespace:
            parts.append(gray(f"[{ctx.namespace}]", self._colors))

        parts.append(colorize(f"[{ctx.level_name}]", level_color(ctx.level), self._colors))

        message = format_args(
            ctx.args,
            depth=self._depth,
            max_array_length=self._max_array_length,
            colors=self._colors,
        )
        if message:
            parts.append(message)

        for key, value in ctx.fields.items():
            rendered = value if isinstance(value, str) else inspect_value(
                value, depth=self._depth, max_array_length=self._max_array_length
            )
            parts.append(f"{key}={rendered}")

        return " ".join(parts)

    # ------------------------------------------------------------------
    # Pipeline and listeners
    # ------------------------------------------------------------------

    def use(self, middleware: Middleware) -> "Logger":
        """Append a stage to this logger's chain."""
        if not callable(middleware):
            raise ConfigurationError(
                "Middleware must be callable",
                context={"middleware": repr(middleware)}
            )
        self._middleware.append(middleware)
        return self

    def add_listener(self, listener: LogListener) -> "Logger":
        self._listeners.add(listener)
        return self

    def remove_listener(self, listener: LogListener) -> "Logger":
        self._listeners.remove(listener)
        return self

    @property
    def middleware(self) -> Tuple[Middleware, ...]:
        return tuple(self._middleware)

    @property
    def listeners(self) -> Tuple[LogListener, ...]:
        return tuple(self._listeners)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def child(
        self,
        segment: str,
        level: Optional[LevelLike] = None,
        colors: Optional[bool] = None,
        timestamp: Any = None,
        depth: Optional[int] = None,
        max_array_length: Optional[int] = None,
    ) -> "Logger":
        """
        Derive a child logger.

        The child's namespace is ``<parent namespace>:<segment>`` (or just
        ``segment``). Settings default to the parent's current ones unless
        overridden. The stage list and listeners are copied now; later changes
        on either logger do not affect the other.

        Args:
            segment: Namespace segment appended for the child
            level: Override the inherited level threshold
            colors: Override the inherited color setting
            timestamp: Override the inherited timestamp mode (``False`` disables)
            depth: Override the inherited inspection depth
            max_array_length: Override the inherited container limit

        Returns:
            New, independent Logger
        """
        if not isinstance(segment, str) or not segment:
            raise ConfigurationError(
                "Child namespace segment must be a non-empty string",
                context={"segment": repr(segment)}
            )

        child = Logger(
            level=level if level is not None else self._level,
            namespace=f"{self._namespace}:{segment}" if self._namespace else segment,
            colors=colors if colors is not None else self._colors,
            timestamp=timestamp if timestamp is not None else (self._timestamp or False),
            depth=depth if depth is not None else self._depth,
            max_array_length=max_array_length if max_array_length is not None else self._max_array_length,
            sink=self._sink,
            settings=self._settings,
            clock=self._clock,
        )
        child._middleware = list(self._middleware)
        child._listeners = self._listeners.copy()
        child._gate = EmissionGate(child._sink, child._listeners)
        return child

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def namespace(self) -> Optional[str]:
        return self._namespace

    @property
    def colors(self) -> bool:
        return self._colors

    @property
    def timestamp(self) -> Optional[TimestampMode]:
        return self._timestamp

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def max_array_length(self) -> int:
        return self._max_array_length

    @property
    def sink(self):
        return self._sink

    def get_level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LevelLike) -> "Logger":
        self._level = parse_level(level)
        return self

    def silent(self) -> "Logger":
        """Suppress all output, whatever the message level."""
        self._level = LogLevel.SILENT
        return self

    def enable_colors(self) -> "Logger":
        self._colors = True
        return self

    def disable_colors(self) -> "Logger":
        self._colors = False
        return self

    def set_timestamp(self, mode: Any) -> "Logger":
        self._timestamp = normalize_timestamp_mode(mode)
        return self

    def set_depth(self, depth: int) -> "Logger":
        self._depth = _validate_size("depth", depth)
        return self

    def set_max_array_length(self, max_array_length: int) -> "Logger":
        self._max_array_length = _validate_size("max_array_length", max_array_length)
        return self

    def __repr__(self) -> str:
        return (
            f"<Logger namespace={self._namespace!r} level={self._level.name} "
            f"stages={len(self._middleware)} listeners={len(self._listeners)}>"
        )


def _validate_size(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"{name} must be a non-negative integer",
            context={name: value}
        )
    return value
