"""
Test module for chainlog.infrastructure.diagnostics
"""

import json
import logging
from unittest.mock import patch

import structlog

from chainlog.exceptions import MiddlewareError
from chainlog.infrastructure.diagnostics import (
    ROOT_LOGGER_NAME,
    DiagnosticsLogger,
    LazyLogger,
    get_logger,
)


def diagnostics_records(caplog):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name.startswith(ROOT_LOGGER_NAME)]


class TestDiagnosticsLogger:
    """Test cases for DiagnosticsLogger class."""

    def test_processor_chain(self):
        """Test that the chain ends with JSON rendering and carries the marker."""
        config = DiagnosticsLogger(level=logging.WARNING)

        assert config.processors[0] is structlog.stdlib.filter_by_level
        assert isinstance(config.processors[-1], structlog.processors.JSONRenderer)
        assert config.add_library_marker in config.processors

    def test_sets_root_logger_level(self):
        DiagnosticsLogger(level=logging.ERROR)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.ERROR

    def test_level_from_settings(self, monkeypatch):
        monkeypatch.setenv("CHAINLOG_DIAGNOSTICS_LEVEL", "error")
        assert DiagnosticsLogger().level == logging.ERROR

    def test_global_structlog_configuration_untouched(self):
        before = structlog.get_config()

        get_logger("chainlog.test").warning("probe")

        assert structlog.get_config() == before

    def test_add_library_marker(self):
        event_dict = DiagnosticsLogger.add_library_marker(None, "error", {"event": "x"})
        assert event_dict["source"] == "chainlog"


class TestGetLogger:
    """Test cases for the diagnostics logger factory."""

    def test_emits_json_to_stdlib(self, caplog):
        """Test that diagnostics reach the stdlib hierarchy as JSON lines."""
        log = get_logger("chainlog.core.chain")

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            log.warning("continuation_called_twice", stage="eager", position=1)

        [entry] = diagnostics_records(caplog)
        assert entry["event"] == "continuation_called_twice"
        assert entry["stage"] == "eager"
        assert entry["position"] == 1
        assert entry["level"] == "warning"
        assert entry["logger"] == "chainlog.core.chain"
        assert entry["source"] == "chainlog"
        assert "timestamp" in entry

    def test_exception_rendered(self, caplog):
        error = MiddlewareError("explode", 0, RuntimeError("stage broke"))

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            get_logger("chainlog.core.chain").error("middleware_failed", exc_info=error)

        [entry] = diagnostics_records(caplog)
        assert "MiddlewareError" in entry["exception"]

    def test_below_threshold_dropped(self, caplog, monkeypatch):
        monkeypatch.setenv("CHAINLOG_DIAGNOSTICS_LEVEL", "ERROR")

        with caplog.at_level(logging.DEBUG):
            get_logger("chainlog.core.listeners").warning("listener_failed")

        assert diagnostics_records(caplog) == []


class TestLazyLogger:
    """Test cases for import-time safe logger handles."""

    def test_resolves_on_first_use_only(self):
        with patch('chainlog.infrastructure.diagnostics.get_logger') as mock_get_logger:
            lazy = LazyLogger("chainlog.sample")
            mock_get_logger.assert_not_called()

            lazy.info("first")
            lazy.error("second")

            mock_get_logger.assert_called_once_with("chainlog.sample")
            mock_get_logger.return_value.info.assert_called_once_with("first")
            mock_get_logger.return_value.error.assert_called_once_with("second")


class TestRenderedReports:
    """Test reports from the pipeline as rendered by the real processor chain."""

    def test_stage_failure_keeps_call_level(self, caplog, make_logger):
        """Test that the failing call's level survives next to the report's own level."""
        def explode(ctx, call_next):
            raise RuntimeError("stage broke")

        log = make_logger(namespace="app").use(explode)

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            log.info("hello")

        [entry] = diagnostics_records(caplog)
        assert entry["event"] == "middleware_failed"
        assert entry["level"] == "error"
        assert entry["log_level"] == "INFO"
        assert entry["namespace"] == "app"
        assert entry["position"] == 0

    def test_listener_failure_keeps_call_level(self, caplog, make_logger):
        def broken(ctx):
            raise ValueError("listener broke")

        log = make_logger().add_listener(broken)

        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            log.warning("disk almost full")

        [entry] = diagnostics_records(caplog)
        assert entry["event"] == "listener_failed"
        assert entry["log_level"] == "WARNING"
