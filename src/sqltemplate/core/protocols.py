"""
Canonical protocol definitions for sqltemplate.

Two families of structural contracts live here:

- **Consumed**: what the template needs from a database driver
  (``ConnectionFactory``, ``Connection``, ``Statement``, ``ResultCursor``).
  ``sqltemplate.core.adapters`` implements them over PEP 249 drivers;
  tests implement them with mocks.
- **Supplied**: what callers hand to the template (``RowMapper``,
  ``ParameterBinder``, ``ResultExtractor``).

Manifesto:
    Protocols define contracts without inheritance. They enable:
    - **Decoupling:** The template depends on shape, not on a driver
    - **Testability:** Any object matching the protocol works, mocks included
    - **Open extension:** Callers add strategies without registering them

Architecture:
    ::

        ConnectionFactory.acquire()
            └── Connection.prepare(sql)
                    └── Statement.bind_positional / bind_typed
                    └── Statement.execute_query() → ResultCursor
                    └── Statement.execute_update() → int

        ResultExtractor.extract(cursor)
            └── RowMapper(cursor, row_ordinal)  (once per row)

Guardrails:
    ❌ DON'T: Keep a reference to a Connection, Statement or ResultCursor
       after the template call that handed it to you returns
    ✅ DO: Copy what you need out of the cursor inside the mapper

Tags:
    protocol, connection, statement, cursor, row-mapper, extractor,
    sqltemplate, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


class StatementMode(str, Enum):
    """How a statement is run: as a query (rows) or an update (row count)."""

    QUERY = "query"
    UPDATE = "update"


# ---------------------------------------------------------------------------
# Consumed: driver side
# ---------------------------------------------------------------------------


@runtime_checkable
class ResultCursor(Protocol):
    """
    Forward-only iterator over the rows of one executed query.

    ``advance()`` moves to the next row and reports whether one exists.
    ``current_row_ordinal()`` is 1-based for the current row and 0 before
    the first ``advance()`` or after the cursor is exhausted. Typed
    accessors read a column of the current row by name; SQL NULL reads as
    ``None``.
    """

    def advance(self) -> bool: ...

    def current_row_ordinal(self) -> int: ...

    def column_names(self) -> list[str]: ...

    def get_object(self, name: str) -> Any: ...

    def get_long(self, name: str) -> int | None: ...

    def get_string(self, name: str) -> str | None: ...

    def get_float(self, name: str) -> float | None: ...

    def get_decimal(self, name: str) -> Decimal | None: ...

    def get_bool(self, name: str) -> bool | None: ...

    def get_date(self, name: str) -> date | None: ...

    def get_datetime(self, name: str) -> datetime | None: ...

    def get_bytes(self, name: str) -> bytes | None: ...

    def release(self) -> None: ...


@runtime_checkable
class Statement(Protocol):
    """A prepared, parameterized statement bound to one connection."""

    def bind_positional(self, index: int, value: Any) -> None:
        """Bind ``value`` at 1-based ``index`` without a declared type."""
        ...

    def bind_typed(self, index: int, value: Any, kind: Any) -> None:
        """Bind ``value`` at 1-based ``index`` as a specific ``ParamKind``."""
        ...

    def execute_query(self) -> ResultCursor: ...

    def execute_update(self) -> int: ...

    def release(self) -> None: ...


@runtime_checkable
class Connection(Protocol):
    """One database connection. ``release()`` must be idempotent."""

    def prepare(self, sql: str) -> Statement: ...

    def release(self) -> None: ...


@runtime_checkable
class ConnectionFactory(Protocol):
    """
    Hands out connections on demand.

    Must support independent concurrent ``acquire()`` calls; any waiting
    (pool exhaustion, network connect) is bounded by the factory's own
    configuration.
    """

    def acquire(self) -> Connection: ...


# ---------------------------------------------------------------------------
# Supplied: caller side
# ---------------------------------------------------------------------------


class RowMapper(Protocol[T_co]):
    """Turn the cursor's current row into one object.

    Plain functions and lambdas satisfy this protocol::

        user_mapper = lambda cursor, _: User(cursor.get_long("id"), cursor.get_string("account"))
    """

    def __call__(self, cursor: ResultCursor, row_ordinal: int) -> T_co: ...


class ParameterBinder(Protocol):
    """Bind parameters onto a prepared statement, by side effect only."""

    def bind(self, statement: Statement) -> None: ...


class ResultExtractor(Protocol[T_co]):
    """
    Consume a live cursor and produce one result value.

    An extractor may declare a ``mode`` attribute; one set to
    ``StatementMode.UPDATE`` makes the template run the statement as an
    update and skip extraction.
    """

    def extract(self, cursor: ResultCursor) -> T_co: ...


__all__ = [
    "StatementMode",
    "ResultCursor",
    "Statement",
    "Connection",
    "ConnectionFactory",
    "RowMapper",
    "ParameterBinder",
    "ResultExtractor",
]
