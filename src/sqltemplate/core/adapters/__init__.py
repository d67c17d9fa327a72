"""Connection factories -- the driver side of the template.

Manifesto:
    ``SqlTemplate`` only speaks the protocols in ``sqltemplate.core.protocols``.
    This package implements them over real PEP 249 drivers so the template
    can run against SQLite and PostgreSQL without either leaking into
    calling code.

    Each factory is **import-guarded** where the driver is optional:
    psycopg2 is only required at ``acquire()`` time. Install the extra::

        pip install sqltemplate[postgresql]   # psycopg2-binary

Architecture::

    dbapi.py         DbApiConnection / DbApiStatement / DbApiResultCursor
    sqlite.py        SQLiteConnectionFactory (stdlib sqlite3)
    postgresql.py    PostgreSQLConnectionFactory (psycopg2, optional)
    registry.py      FactoryRegistry, get_factory(), create_factory(url)
    types.py         DatabaseType enum + DatabaseConfig

Guardrails:
    ❌ ``template.query_for_list("SELECT * FROM t WHERE id=" + user_input, m)``
    ✅ ``template.query_for_list("SELECT * FROM t WHERE id=?", m, user_input)``

Tags:
    sqltemplate, database, adapters, dbapi, sqlite, postgresql
"""

from .dbapi import DbApiConnection, DbApiResultCursor, DbApiStatement
from .postgresql import PostgreSQLConnectionFactory
from .registry import FactoryRegistry, create_factory, factory_registry, get_factory, parse_url
from .sqlite import SQLiteConnectionFactory
from .types import DatabaseConfig, DatabaseType

__all__ = [
    # Types
    "DatabaseType",
    "DatabaseConfig",
    # DB-API bridge
    "DbApiConnection",
    "DbApiStatement",
    "DbApiResultCursor",
    # Factories
    "SQLiteConnectionFactory",
    "PostgreSQLConnectionFactory",
    # Registry
    "FactoryRegistry",
    "factory_registry",
    "get_factory",
    "parse_url",
    "create_factory",
]
