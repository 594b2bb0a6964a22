"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from brandlens import __version__
from brandlens.logging import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_events_carry_service(self, capsys: pytest.CaptureFixture[str]):
        configure_logging(log_level="INFO", log_format="json", service="brandlens-worker")

        structlog.get_logger().info("Task finished", task="generate_queries_for_topic")

        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert event["event"] == "Task finished"
        assert event["service"] == "brandlens-worker"
        assert event["version"] == __version__
        assert event["level"] == "info"

    def test_level_filters_lower_events(self, capsys: pytest.CaptureFixture[str]):
        configure_logging(log_level="WARNING", log_format="json")

        structlog.get_logger().info("hidden")

        assert capsys.readouterr().out == ""

    def test_http_client_loggers_quieted(self):
        configure_logging(log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG
