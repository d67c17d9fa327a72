"""
SqlTemplate - run one SQL statement with guaranteed resource cleanup.

The template owns the whole lifecycle of a call: acquire a connection,
prepare the statement, bind parameters, run it, hand the cursor to an
extractor, and release cursor, statement and connection in reverse order
no matter how the call ends. Callers only supply *what* to bind and *how*
to read rows.

Manifesto:
    Hand-written data access repeats the same nested try/finally around
    every query, and each copy is one forgotten ``close()`` away from a
    connection leak. The template writes that discipline down once.

    - **One lifecycle:** acquire → prepare → bind → run → extract → release
    - **Pluggable strategies:** ParameterBinder, ResultExtractor, RowMapper
    - **Uniform errors:** Driver failures surface as DataAccessError
    - **Caller errors stay caller errors:** Mapper/extractor exceptions are
      never rewrapped

Architecture:
    ::

        template.execute(sql, binder, extractor)
            │
            ├── ReleaseScope ──────────────────────────────────────┐
            │   connection = factory.acquire()    AcquisitionError │
            │   statement  = connection.prepare() PreparationError │
            │   binder.bind(statement)            BindingError     │
            │   cursor     = statement.execute_*  ExecutionError   │
            │   result     = extractor.extract(cursor)  (as-is)    │
            └── release cursor → statement → connection ───────────┘
            │
            └── result

        query_for_object / query_for_list / update / query / ...
            = execute + PositionalBinder + a default extractor

Examples:
    >>> template = SqlTemplate(SQLiteConnectionFactory("app.db"))
    >>> user_mapper = lambda c, _: User(c.get_long("id"), c.get_string("account"))
    >>> template.query_for_object("select * from users where id = ?", user_mapper, 1)
    User(id=1, account='gugu')
    >>> template.update("update users set account = ? where id = ?", "left hand", 1)
    1

Performance:
    - One connection acquisition per call; pooling is the factory's concern
    - No per-call state on the template, safe to share across threads

Tags:
    sql, template, executor, resource-management, data-access, sqltemplate

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

from sqltemplate.core.binding import PositionalBinder
from sqltemplate.core.errors import (
    AcquisitionError,
    BindingError,
    DataAccessError,
    ErrorContext,
    ExecutionError,
    PreparationError,
)
from sqltemplate.core.extraction import (
    AFFECTED_ROWS,
    RowListExtractor,
    SingleRowExtractor,
)
from sqltemplate.core.logging import get_logger
from sqltemplate.core.mappers import ColumnMapper, DictRowMapper
from sqltemplate.core.protocols import (
    ConnectionFactory,
    ParameterBinder,
    ResultExtractor,
    RowMapper,
    StatementMode,
)
from sqltemplate.core.scope import ReleaseScope

logger = get_logger(__name__)

T = TypeVar("T")

_FAILURE_MESSAGES = {
    "acquire": "Failed to acquire connection",
    "prepare": "Failed to prepare statement",
    "bind": "Failed to bind parameters",
    "execute": "Failed to execute statement",
}


class SqlTemplate:
    """
    Executes SQL against connections from an explicitly supplied factory.

    The factory is the only shared resource. Each call acquires its own
    connection, statement and cursor and releases all of them before
    returning or raising, so one template can serve concurrent callers
    without locking.
    """

    def __init__(self, factory: ConnectionFactory):
        self._factory = factory

    @classmethod
    def from_settings(cls, settings: Any = None) -> SqlTemplate:
        """Build a template around the factory described by ``settings``.

        Defaults to ``TemplateSettings()``, i.e. the environment.
        """
        from sqltemplate.core.settings import TemplateSettings

        settings = settings or TemplateSettings()
        return cls(settings.create_factory())

    @property
    def factory(self) -> ConnectionFactory:
        return self._factory

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def execute(
        self,
        sql: str,
        binder: ParameterBinder | None = None,
        extractor: ResultExtractor[T] | None = None,
        *,
        mode: StatementMode | str | None = None,
    ) -> T | int:
        """Run ``sql`` once and return the extractor's result.

        Args:
            sql: Statement text, in the driver's paramstyle
            binder: Binds parameters onto the prepared statement; None binds nothing
            extractor: Reads the cursor in query mode; ignored in update mode.
                None with no ``mode`` means update mode.
            mode: Overrides the extractor's declared ``mode``

        Returns:
            The extractor's value in query mode, the affected-row count in
            update mode.

        Raises:
            AcquisitionError, PreparationError, BindingError, ExecutionError:
                driver-level failures, with the original exception as cause.
            Anything the extractor or its mapper raises, unchanged.
        """
        mode = _resolve_mode(extractor, mode)
        if mode is StatementMode.QUERY and extractor is None:
            raise TypeError("Query mode requires a result extractor")

        started = time.perf_counter()
        with ReleaseScope(sql=sql) as scope:
            connection = scope.register(
                "connection",
                _guarded("acquire", sql, AcquisitionError, self._factory.acquire),
            )
            statement = scope.register(
                "statement",
                _guarded("prepare", sql, PreparationError, connection.prepare, sql),
            )
            if binder is not None:
                _guarded("bind", sql, BindingError, binder.bind, statement)

            if mode is StatementMode.UPDATE:
                result = _guarded("execute", sql, ExecutionError, statement.execute_update)
                rows = result
            else:
                cursor = scope.register(
                    "cursor",
                    _guarded("execute", sql, ExecutionError, statement.execute_query),
                )
                result = extractor.extract(cursor)
                rows = None

        logger.debug(
            "statement_executed",
            sql=sql,
            mode=mode.value,
            rows=rows,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        return result

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def query_for_object(self, sql: str, row_mapper: RowMapper[T], *params: Any) -> T | None:
        """Map the first matching row, or return None when nothing matches.

        Extra rows beyond the first are ignored; callers must make sure at
        most one row can match.
        """
        return self.execute(sql, PositionalBinder(params), SingleRowExtractor(row_mapper))

    def query_for_list(self, sql: str, row_mapper: RowMapper[T], *params: Any) -> list[T]:
        """Map every matching row in cursor order. Never returns None."""
        return self.execute(sql, PositionalBinder(params), RowListExtractor(row_mapper))

    def update(self, sql: str, *params: Any) -> int:
        """Run a mutating statement and return the affected-row count."""
        return self.execute(sql, PositionalBinder(params), AFFECTED_ROWS)

    def query(self, sql: str, extractor: ResultExtractor[T], *params: Any) -> T:
        """Run a query with positional ``params`` and a custom extractor."""
        return self.execute(sql, PositionalBinder(params), extractor, mode=StatementMode.QUERY)

    def execute_update(self, sql: str, binder: ParameterBinder | None = None) -> int:
        """Run a mutating statement with a custom binder."""
        return self.execute(sql, binder, mode=StatementMode.UPDATE)

    def query_for_scalar(self, sql: str, *params: Any, column: str | None = None) -> Any:
        """Return one column of the first row, None when no row matches."""
        return self.query_for_object(sql, ColumnMapper(column), *params)

    def query_for_dicts(self, sql: str, *params: Any) -> list[dict[str, Any]]:
        """Return every matching row as a ``{column: value}`` dict."""
        return self.query_for_list(sql, DictRowMapper(), *params)


def _resolve_mode(extractor: Any, mode: StatementMode | str | None) -> StatementMode:
    if mode is None:
        mode = getattr(extractor, "mode", None) if extractor is not None else StatementMode.UPDATE
    return StatementMode(mode or StatementMode.QUERY)


def _guarded(
    phase: str,
    sql: str,
    error_cls: type[DataAccessError],
    fn: Callable[..., T],
    *args: Any,
) -> T:
    """Call ``fn`` and translate any failure into ``error_cls``.

    A DataAccessError raised by ``fn`` (an adapter already classified it)
    passes through with the SQL filled in.
    """
    try:
        return fn(*args)
    except DataAccessError as e:
        e.with_defaults(sql=sql, phase=phase)
        logger.debug("statement_failed", phase=phase, sql=sql, error=e.message)
        raise
    except Exception as e:
        logger.debug("statement_failed", phase=phase, sql=sql, error=str(e))
        raise error_cls(
            f"{_FAILURE_MESSAGES[phase]}: {e}",
            cause=e,
            context=ErrorContext(sql=sql, phase=phase),
        ) from e


__all__ = [
    "SqlTemplate",
]
