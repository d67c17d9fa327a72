"""Connection settings shared by the factories."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

from sqltemplate.core.errors import ConfigError


class DatabaseType(str, Enum):
    """Databases a built-in factory can connect to."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"

    @classmethod
    def from_scheme(cls, scheme: str) -> DatabaseType:
        """Map a URL scheme (``postgres``, ``postgresql+psycopg2``...) to a type."""
        base = scheme.lower().split("+", 1)[0]
        if base == "postgres":
            return cls.POSTGRESQL
        try:
            return cls(base)
        except ValueError:
            raise ConfigError(f"Unsupported database URL scheme: {scheme}") from None


@dataclass
class DatabaseConfig:
    """
    What a factory needs to open a connection.

    SQLite reads ``path``; PostgreSQL reads the server fields. ``options``
    is passed to the driver's ``connect()`` unchanged.
    """

    db_type: DatabaseType = DatabaseType.SQLITE

    # file or URI, ":memory:" when unset
    path: str | None = None

    # server
    host: str = "localhost"
    port: int = 5432
    database: str = ""
    username: str | None = None
    password: str | None = None
    ssl_mode: str = "prefer"

    connect_timeout: int = 10
    readonly: bool = False
    options: dict[str, Any] = field(default_factory=dict)

    def to_connection_string(self, *, redact: bool = False) -> str:
        """Render the config as a path (SQLite) or URL (PostgreSQL).

        With ``redact`` the password is replaced by ``***``, for logs and reprs.
        """
        if self.db_type is DatabaseType.SQLITE:
            return self.path or ":memory:"
        if self.db_type is DatabaseType.POSTGRESQL:
            credentials = ""
            if self.username:
                credentials = quote(self.username, safe="")
                if self.password:
                    secret = "***" if redact else quote(self.password, safe="")
                    credentials = f"{credentials}:{secret}"
                credentials += "@"
            return f"postgresql://{credentials}{self.host}:{self.port}/{self.database}"
        raise ConfigError(f"Connection string not supported for: {self.db_type}")


__all__ = [
    "DatabaseType",
    "DatabaseConfig",
]
