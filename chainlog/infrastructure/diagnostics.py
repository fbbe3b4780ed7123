"""
chainlog Diagnostics Logging

Builds structlog loggers for the library's own diagnostics: failing middleware
stages, duplicate continuations, listener and sink failures. These reports never
go through a chainlog Logger; they are rendered as JSON and handed to the
standard library logger hierarchy under ``chainlog``.

The processor chain is attached per logger with ``structlog.wrap_logger`` so
that an application's global structlog configuration is left untouched.
"""

import logging
from typing import Any, Dict, List, Optional

import structlog

ROOT_LOGGER_NAME = "chainlog"


class DiagnosticsLogger:
    """
    structlog configuration for library diagnostics.

    Holds a processor chain that handles level filtering, logger name and
    level annotation, ISO timestamps, exception formatting and JSON rendering,
    and applies the diagnostics threshold to the ``chainlog`` stdlib logger.
    """

    def __init__(self, level: Optional[int] = None):
        """
        Initialize the diagnostics configuration.

        Args:
            level: stdlib level for the ``chainlog`` logger; read from settings
                when omitted
        """
        self.level = level if level is not None else self._level_from_settings()
        self.processors = self.build_processors()
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(self.level)

    @staticmethod
    def _level_from_settings() -> int:
        from chainlog.config.settings import get_settings

        return logging.getLevelName(get_settings().diagnostics_level)

    def build_processors(self) -> List[Any]:
        """
        Build the structlog processor chain.

        Sets up processors that handle:
        - Log level filtering
        - Logger name and level addition
        - Timestamp formatting
        - Exception information
        - JSON output formatting
        """
        return [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            self.add_library_marker,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]

    @staticmethod
    def add_library_marker(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Tag every diagnostic with its origin.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with a ``source`` field
        """
        event_dict.setdefault("source", ROOT_LOGGER_NAME)
        return event_dict

    def wrap(self, name: str) -> structlog.stdlib.BoundLogger:
        return structlog.wrap_logger(
            logging.getLogger(name),
            processors=self.processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
        )


# Singleton configuration instance
_diagnostics_config: Optional[DiagnosticsLogger] = None


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured diagnostics logger.

    Uses a singleton configuration so the processor chain and level are set up
    once per process.

    Args:
        name: Logger name, typically the module name

    Returns:
        Configured structlog BoundLogger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.error("middleware_failed", stage="redact")
    """
    global _diagnostics_config
    if _diagnostics_config is None:
        _diagnostics_config = DiagnosticsLogger()

    return _diagnostics_config.wrap(name)


class LazyLogger:
    """
    Logger handle that is safe to create at import time.

    Resolves the underlying diagnostics logger on first use, so importing
    chainlog never reads settings.
    """

    def __init__(self, name: str):
        self.name = name
        self._logger: Optional[structlog.stdlib.BoundLogger] = None

    def __getattr__(self, item: str) -> Any:
        if self._logger is None:
            self._logger = get_logger(self.name)
        return getattr(self._logger, item)


def reset_diagnostics() -> None:
    """Forget the current configuration (primarily for testing)."""
    global _diagnostics_config
    _diagnostics_config = None
