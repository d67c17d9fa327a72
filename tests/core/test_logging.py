"""Tests for ``sqltemplate.core.logging``: structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from sqltemplate.core import logging as sqltemplate_logging
from sqltemplate.core.errors import ConfigError
from sqltemplate.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    sqltemplate_logging._SERVICE_NAME = "sqltemplate"


class TestConfigureLogging:
    def test_json_renderer(self):
        configure_logging(level="DEBUG", json_format=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert sqltemplate_logging._ecs_field_names in processors

    def test_console_renderer(self):
        configure_logging(json_format=False)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert sqltemplate_logging._ecs_field_names not in processors

    def test_timestamp_optional(self):
        configure_logging(json_format=True, add_timestamp=False)

        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_level_filters(self):
        configure_logging(level="WARNING", json_format=True)

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.WARNING)

    def test_service_name(self):
        configure_logging(json_format=True, service="billing")

        event = sqltemplate_logging._add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == "billing"

    def test_unknown_level(self):
        with pytest.raises(ConfigError, match="Unknown log level: chatty"):
            configure_logging(level="chatty")


class TestProcessors:
    def test_service_name_not_overwritten(self):
        event = sqltemplate_logging._add_service_metadata(
            None, "info", {"event": "x", "service.name": "mine"}
        )
        assert event["service.name"] == "mine"

    def test_elasticsearch_field_names(self):
        event = sqltemplate_logging._ecs_field_names(
            None, "info", {"event": "x", "timestamp": "2024-01-02T00:00:00Z", "level": "info"}
        )
        assert event == {"event": "x", "@timestamp": "2024-01-02T00:00:00Z", "log.level": "info"}

    def test_long_sql_shortened(self):
        preview = sqltemplate_logging._sql_preview(10)

        event = preview(None, "debug", {"event": "x", "sql": "select * from users"})
        assert event["sql"] == "select * f..."

    def test_short_sql_untouched(self):
        preview = sqltemplate_logging._sql_preview(10)

        assert preview(None, "debug", {"sql": "select 1"}) == {"sql": "select 1"}


class TestGetLogger:
    def test_returns_structlog_logger(self):
        with capture_logs() as logs:
            get_logger("sqltemplate.test").info("statement_executed", rows=1)

        assert logs == [{"event": "statement_executed", "rows": 1, "log_level": "info"}]
