"""Environment-driven settings for sqltemplate.

``TemplateSettings`` reads ``SQLTEMPLATE_*`` environment variables (and a
``.env`` file) and knows how to turn them into a connection factory and a
logging setup.

Examples:
    >>> settings = TemplateSettings(database_url="sqlite:///app.db")
    >>> template = SqlTemplate.from_settings(settings)

    $ export SQLTEMPLATE_DATABASE_URL=postgresql://app:secret@db:5432/app
    $ export SQLTEMPLATE_LOG_LEVEL=DEBUG

Tags:
    settings, configuration, pydantic, environment, sqltemplate
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqltemplate.core.protocols import ConnectionFactory


class TemplateSettings(BaseSettings):
    """Settings for building a connection factory and configuring logs.

    Fields
    ──────
    database_url     : ``:memory:``, a SQLite path / URL, or a PostgreSQL URL
    connect_timeout  : Seconds to wait for a connection
    readonly         : Open connections read-only
    log_level        : Structlog log level
    log_json         : JSON logs (True), console (False), auto (None)
    service_name     : ``service.name`` added to every log line
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLTEMPLATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = ":memory:"
    connect_timeout: int = Field(default=10, ge=0)
    readonly: bool = False

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = "sqltemplate"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def create_factory(self) -> ConnectionFactory:
        """Build the connection factory ``database_url`` points at."""
        from sqltemplate.core.adapters.registry import create_factory, parse_url

        name, _ = parse_url(self.database_url)
        if name == "sqlite":
            return create_factory(
                self.database_url,
                readonly=self.readonly,
                timeout=float(self.connect_timeout),
            )
        return create_factory(
            self.database_url,
            readonly=self.readonly,
            connect_timeout=self.connect_timeout,
        )

    def configure_logging(self) -> None:
        """Apply ``log_level`` / ``log_json`` / ``service_name``."""
        from sqltemplate.core.logging import configure_logging

        configure_logging(
            level=self.log_level,
            json_format=self.log_json,
            service=self.service_name,
        )


__all__ = [
    "TemplateSettings",
]
