"""
Argument-rewriting stages: prefix, suffix, redaction and error stacks.
"""

import re
from typing import Iterable, List, Pattern, Union

from chainlog.core.chain import Middleware, Next
from chainlog.core.context import LogContext
from chainlog.core.levels import LogLevel
from chainlog.exceptions import ConfigurationError
from chainlog.formatting.inspect import format_exception

REDACTED = "[REDACTED]"


def prefix_middleware(prefix: str) -> Middleware:
    def add_prefix(ctx: LogContext, call_next: Next) -> None:
        ctx.args = [prefix, *ctx.args]
        call_next()

    return add_prefix


def suffix_middleware(suffix: str) -> Middleware:
    def add_suffix(ctx: LogContext, call_next: Next) -> None:
        ctx.args = [*ctx.args, suffix]
        call_next()

    return add_suffix


class RedactMiddleware:
    """
    Mask sensitive text in string arguments.

    Literal strings are replaced wherever they occur; compiled patterns have
    every match replaced. Non-string arguments are left untouched.
    """

    def __init__(self, patterns: Iterable[Union[str, Pattern]], placeholder: str = REDACTED):
        self.patterns: List[Union[str, Pattern]] = list(patterns)
        for pattern in self.patterns:
            if isinstance(pattern, str):
                if not pattern:
                    raise ConfigurationError("Redaction patterns must not be empty")
            elif not isinstance(pattern, re.Pattern):
                raise ConfigurationError(
                    "Redaction patterns must be strings or compiled regular expressions",
                    context={"pattern": repr(pattern)}
                )
        self.placeholder = placeholder

    def redact(self, text: str) -> str:
        for pattern in self.patterns:
            if isinstance(pattern, str):
                text = text.replace(pattern, self.placeholder)
            else:
                text = pattern.sub(self.placeholder, text)
        return text

    def __call__(self, ctx: LogContext, call_next: Next) -> None:
        ctx.args = [self.redact(arg) if isinstance(arg, str) else arg for arg in ctx.args]
        call_next()


def redact_middleware(patterns: Iterable[Union[str, Pattern]], placeholder: str = REDACTED) -> RedactMiddleware:
    return RedactMiddleware(patterns, placeholder)


def error_stack_middleware() -> Middleware:
    """At ERROR and above, replace exception arguments with their traceback text."""

    def expand_error_stacks(ctx: LogContext, call_next: Next) -> None:
        if ctx.level >= LogLevel.ERROR:
            ctx.args = [
                format_exception(arg) if isinstance(arg, BaseException) else arg
                for arg in ctx.args
            ]
        call_next()

    return expand_error_stacks
