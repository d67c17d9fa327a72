"""SQLite connection factory."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from sqltemplate.core.errors import AcquisitionError

from .dbapi import DbApiConnection
from .types import DatabaseConfig, DatabaseType


def _adapt(value: Any) -> Any:
    """Convert values sqlite3 cannot store natively to text."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


class SQLiteConnectionFactory:
    """
    Opens a new SQLite connection per ``acquire()``.

    Uses the built-in sqlite3 module. Connections run in autocommit mode
    with foreign keys enforced. Suitable for:
    - Development and testing
    - Single-process applications

    Note that every ``:memory:`` connection is a separate, empty database;
    use a file path (or a shared-cache URI) for data that must outlive a
    single call.
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        readonly: bool = False,
        timeout: float = 5.0,
        **kwargs: Any,
    ):
        self._config = DatabaseConfig(
            db_type=DatabaseType.SQLITE,
            path=path,
            readonly=readonly,
            options=kwargs,
        )
        self._timeout = timeout

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    def acquire(self) -> DbApiConnection:
        """Open a connection to the configured database."""
        path = self._config.path or ":memory:"
        uri = path.startswith("file:")

        try:
            conn = sqlite3.connect(
                path,
                timeout=self._timeout,
                check_same_thread=False,
                uri=uri,
                isolation_level=None,
                **self._config.options,
            )
        except sqlite3.Error as e:
            raise AcquisitionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ) from e

        try:
            conn.execute("PRAGMA foreign_keys = ON")
            if self._config.readonly:
                conn.execute("PRAGMA query_only = ON")
        except sqlite3.Error as e:
            conn.close()
            raise AcquisitionError(
                f"Failed to configure SQLite connection: {e}",
                cause=e,
            ) from e

        return DbApiConnection(conn, error_types=(sqlite3.Error,), adapt=_adapt)

    def __repr__(self) -> str:
        return f"SQLiteConnectionFactory(path={self._config.path!r})"


__all__ = [
    "SQLiteConnectionFactory",
]
