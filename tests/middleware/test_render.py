"""
Test module for chainlog.middleware.render
"""

import json
from unittest.mock import Mock

from chainlog.core.context import build_context
from chainlog.core.levels import LogLevel
from chainlog.middleware.render import JSONMiddleware, json_middleware


class TestJSONMiddleware:
    """Test cases for JSON pre-rendering."""

    def setup_method(self):
        self.stage = json_middleware()

    def test_sets_formatted_message(self, fixed_clock):
        """Test that the stage produces one JSON object and continues."""
        ctx = build_context(LogLevel.ERROR, ["failed", {"code": 5}, [1, 2]], namespace="api", clock=fixed_clock)
        call_next = Mock()

        self.stage(ctx, call_next)

        call_next.assert_called_once()
        assert json.loads(ctx.formatted_message) == {
            "timestamp": "2024-01-01T12:00:00.000Z",
            "level": "ERROR",
            "namespace": "api",
            "message": 'failed {"code": 5} [1, 2]',
        }

    def test_key_order(self, fixed_clock):
        ctx = build_context(LogLevel.INFO, ["x"], namespace="a", clock=fixed_clock)
        self.stage(ctx, Mock())
        assert list(json.loads(ctx.formatted_message)) == ["timestamp", "level", "namespace", "message"]

    def test_namespace_omitted_when_absent(self):
        ctx = build_context(LogLevel.INFO, ["x"])
        self.stage(ctx, Mock())
        assert "namespace" not in json.loads(ctx.formatted_message)

    def test_fields_merged_without_clobbering(self):
        ctx = build_context(LogLevel.INFO, ["x"])
        ctx.fields.update({"trace_id": "abc", "level": "spoofed"})

        entry = JSONMiddleware.build_entry(ctx)

        assert entry["trace_id"] == "abc"
        assert entry["level"] == "INFO"

    def test_non_string_keys_fall_back_to_inspection(self):
        ctx = build_context(LogLevel.INFO, ["lookup", {("a", 1): "x"}])
        call_next = Mock()

        self.stage(ctx, call_next)

        call_next.assert_called_once()
        assert json.loads(ctx.formatted_message)["message"] == "lookup { ('a', 1): 'x' }"

    def test_circular_structure_falls_back_to_inspection(self):
        cycle = {}
        cycle["self"] = cycle
        ctx = build_context(LogLevel.INFO, ["cycle", cycle])

        self.stage(ctx, Mock())

        message = json.loads(ctx.formatted_message)["message"]
        assert message.startswith("cycle { self: { self:")
        assert message.endswith("[Object] } } } } }")

    def test_unserializable_values_fall_back_to_str(self):
        class Opaque:
            def __str__(self):
                return "opaque"

        ctx = build_context(LogLevel.INFO, ["value", Opaque()])
        self.stage(ctx, Mock())

        assert json.loads(ctx.formatted_message)["message"] == 'value "opaque"'
