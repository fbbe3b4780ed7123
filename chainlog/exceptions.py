"""
Exception classes for the chainlog library.

Every error carries a stable error code and a context dictionary. ``str()``
renders both, so an exception attached to a diagnostic record is
self-describing without the surrounding fields.
"""

from typing import Any, Dict, Optional


class ChainlogError(Exception):
    """Base exception for chainlog"""

    default_code = "CHAINLOG_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = dict(context or {})

    def __str__(self):
        text = f"[{self.error_code}] {self.message}"
        if self.context:
            details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
            text = f"{text} ({details})"
        return text


class ConfigurationError(ChainlogError):
    """Invalid logger, stage or settings configuration"""

    default_code = "CONFIG_ERROR"


class MiddlewareError(ChainlogError):
    """
    A middleware stage raised while processing a log call.

    The stage's own exception is chained as ``__cause__``.
    """

    default_code = "MIDDLEWARE_ERROR"

    def __init__(self, stage: str, position: int, cause: BaseException, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Middleware stage {stage} failed: {type(cause).__name__}: {cause}",
            context={"stage": stage, "position": position, **(context or {})},
        )
        self.stage = stage
        self.position = position
        self.__cause__ = cause
