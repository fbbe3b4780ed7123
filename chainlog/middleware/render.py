"""
JSON-shape rendering stage.

Pre-renders the context into a single JSON object so the default text
formatting is skipped at emission:

    {"timestamp": "2024-01-01T12:00:00.000Z", "level": "INFO",
     "namespace": "app:db", "message": "connected {\"pool\": 4}"}
"""

import json
from typing import Any, Dict

import structlog

from chainlog.core.chain import Next
from chainlog.core.context import LogContext
from chainlog.formatting.inspect import inspect_value
from chainlog.formatting.presentation import iso_timestamp


def _message_part(arg: Any) -> str:
    if isinstance(arg, str):
        return arg
    try:
        return json.dumps(arg, default=str)
    except (TypeError, ValueError):
        # non-string keys or circular references
        return inspect_value(arg)


class JSONMiddleware:
    """
    Overwrite ``formatted_message`` with a serialized JSON object.

    Keys are ``timestamp``, ``level``, ``namespace`` (only when set) and
    ``message``, followed by any structured ``fields`` that do not clash with
    them.
    """

    def __init__(self):
        self._renderer = structlog.processors.JSONRenderer()

    @staticmethod
    def build_entry(ctx: LogContext) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "timestamp": iso_timestamp(ctx.timestamp),
            "level": ctx.level_name,
        }
        if ctx.namespace:
            entry["namespace"] = ctx.namespace
        entry["message"] = " ".join(_message_part(arg) for arg in ctx.args)

        for key, value in ctx.fields.items():
            entry.setdefault(key, value)
        return entry

    def __call__(self, ctx: LogContext, call_next: Next) -> None:
        ctx.formatted_message = self._renderer(None, "json", self.build_entry(ctx))
        call_next()


def json_middleware() -> JSONMiddleware:
    return JSONMiddleware()
