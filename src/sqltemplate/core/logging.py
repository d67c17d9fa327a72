"""
Structured logging for sqltemplate.

Every module obtains its logger through ``get_logger(__name__)``;
applications call ``configure_logging()`` once at startup to choose the
level and output format. Until then structlog's defaults apply, which is
what ``structlog.testing.capture_logs`` relies on.

Events emitted by the library:

    statement_executed       debug    sql, mode, rows, duration_ms
    statement_failed         debug    phase, sql, error
    resource_release_failed  warning  ReleaseError.to_dict()

Architecture:
    ::

        configure_logging(level="INFO", json_format=True, service="billing")
            ↓
        structlog processor chain:
          1. merge_contextvars
          2. TimeStamper (iso, optional)
          3. add_log_level / add_logger_name
          4. service.name
          5. sql preview (long statements are shortened)
          6. ECS field names (JSON only)
          7. JSONRenderer or ConsoleRenderer

Examples:
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> get_logger(__name__).debug("statement_executed", sql="select 1", rows=1)

Guardrails:
    - Auto-detects JSON vs console based on TTY when ``json_format`` is None
    - Service name stored globally (set once at startup)

Tags:
    logging, structlog, observability, sqltemplate
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sqltemplate.core.errors import ConfigError

_SERVICE_NAME = "sqltemplate"

SQL_PREVIEW_LENGTH = 500


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp ``service.name`` unless the event already carries one."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _sql_preview(max_length: int) -> Processor:
    """Build a processor that shortens ``sql`` fields beyond ``max_length``."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        sql = event_dict.get("sql")
        if isinstance(sql, str) and len(sql) > max_length:
            event_dict["sql"] = sql[:max_length] + "..."
        return event_dict

    return processor


def _ecs_field_names(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename timestamp / level to their Elastic Common Schema names."""
    for field, ecs_field in (("timestamp", "@timestamp"), ("level", "log.level")):
        if field in event_dict:
            event_dict[ecs_field] = event_dict.pop(field)
    return event_dict


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ConfigError(f"Unknown log level: {level}")
    return number


def _processors(json_format: bool, add_timestamp: bool, sql_preview: int) -> list[Processor]:
    processors: list[Processor] = [structlog.contextvars.merge_contextvars]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
        _sql_preview(sql_preview),
    ]
    if json_format:
        processors += [_ecs_field_names, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "sqltemplate",
    add_timestamp: bool = True,
    sql_preview: int = SQL_PREVIEW_LENGTH,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: ``service.name`` stamped on every event
        add_timestamp: Include ISO timestamp in logs
        sql_preview: Longest ``sql`` field logged before it is shortened

    Raises:
        ConfigError: ``level`` is not a known log level.
    """
    global _SERVICE_NAME

    number = _level_number(level)
    _SERVICE_NAME = service
    if json_format is None:
        json_format = not sys.stdout.isatty()

    structlog.configure(
        processors=_processors(json_format, add_timestamp, sql_preview),
        wrapper_class=structlog.make_filtering_bound_logger(number),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=number)


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger named ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


__all__ = [
    "SQL_PREVIEW_LENGTH",
    "configure_logging",
    "get_logger",
]
