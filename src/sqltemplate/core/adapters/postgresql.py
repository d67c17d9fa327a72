"""PostgreSQL connection factory."""

from __future__ import annotations

from typing import Any

from sqltemplate.core.errors import AcquisitionError, ConfigError

from .dbapi import DbApiConnection
from .types import DatabaseConfig, DatabaseType


class PostgreSQLConnectionFactory:
    """
    Opens a new psycopg2 connection per ``acquire()``.

    Connections run in autocommit mode. psycopg2 is only imported when a
    connection is first requested; install the extra with
    ``pip install sqltemplate[postgresql]``. Statements use psycopg2's
    ``%s`` placeholders.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        connect_timeout: int = 10,
        ssl_mode: str = "prefer",
        readonly: bool = False,
        **kwargs: Any,
    ):
        self._config = DatabaseConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            connect_timeout=connect_timeout,
            ssl_mode=ssl_mode,
            readonly=readonly,
            options=kwargs,
        )

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    def acquire(self) -> DbApiConnection:
        """Open a connection to the configured server."""
        try:
            import psycopg2
        except ImportError:
            raise ConfigError(
                "psycopg2 is required for PostgreSQL. Install with: pip install psycopg2-binary"
            ) from None

        try:
            conn = psycopg2.connect(
                host=self._config.host,
                port=self._config.port,
                dbname=self._config.database,
                user=self._config.username,
                password=self._config.password,
                connect_timeout=self._config.connect_timeout,
                sslmode=self._config.ssl_mode,
                **self._config.options,
            )
        except psycopg2.Error as e:
            raise AcquisitionError(
                f"Failed to connect to PostgreSQL: {e}",
                cause=e,
            ) from e

        try:
            conn.autocommit = True
            if self._config.readonly:
                conn.readonly = True
        except psycopg2.Error as e:
            conn.close()
            raise AcquisitionError(
                f"Failed to configure PostgreSQL connection: {e}",
                cause=e,
            ) from e

        return DbApiConnection(conn, error_types=(psycopg2.Error,))

    def __repr__(self) -> str:
        return f"PostgreSQLConnectionFactory({self._config.to_connection_string(redact=True)!r})"


__all__ = [
    "PostgreSQLConnectionFactory",
]
