"""PEP 249 (DB-API 2.0) implementations of the driver protocols.

``DbApiConnection`` wraps a raw driver connection; ``prepare()`` opens a
driver cursor that becomes the statement handle. Bound parameters are
collected by index and passed to the driver as one tuple when the
statement runs. ``DbApiResultCursor`` reads rows one ``fetchone()`` at a
time and keeps the 1-based row ordinal.

Release ownership follows the template's order: releasing the result
cursor only ends row access, releasing the statement closes the driver
cursor, releasing the connection closes the driver connection. Every
``release()`` is idempotent.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqltemplate.core.binding import ParamKind, validate_value
from sqltemplate.core.errors import (
    BindingError,
    ErrorContext,
    ExecutionError,
    MappingError,
    PreparationError,
)

DriverErrors = tuple[type[BaseException], ...]
Adapter = Callable[[Any], Any]


class DbApiResultCursor:
    """Forward-only view over a driver cursor that has just run a query."""

    def __init__(self, raw_cursor: Any, error_types: DriverErrors = (Exception,)):
        self._cursor = raw_cursor
        self._errors = error_types
        self._columns = [desc[0] for desc in raw_cursor.description or ()]
        self._index = {name: i for i, name in enumerate(self._columns)}
        self._folded = {name.lower(): i for i, name in reversed(list(enumerate(self._columns)))}
        self._row: Any = None
        self._ordinal = 0
        self._fetched = 0
        self._exhausted = False
        self._released = False

    def advance(self) -> bool:
        if self._released:
            raise ExecutionError("Cursor has been released")
        if self._exhausted:
            return False
        try:
            row = self._cursor.fetchone()
        except self._errors as e:
            raise ExecutionError(
                f"Failed to fetch row: {e}",
                cause=e,
                context=ErrorContext(phase="fetch"),
            ) from e
        if row is None:
            self._row = None
            self._ordinal = 0
            self._exhausted = True
            return False
        self._fetched += 1
        self._row = row
        self._ordinal = self._fetched
        return True

    def current_row_ordinal(self) -> int:
        return self._ordinal

    def column_names(self) -> list[str]:
        return list(self._columns)

    def get_object(self, name: str) -> Any:
        if self._row is None:
            raise MappingError("No current row", column=name)
        index = self._index.get(name)
        if index is None:
            index = self._folded.get(name.lower())
        if index is None:
            raise MappingError(f"Unknown column: {name}", column=name)
        return self._row[index]

    def get_long(self, name: str) -> int | None:
        value = self.get_object(name)
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            return value
        raise _wrong_type(name, value, "integer")

    def get_string(self, name: str) -> str | None:
        value = self.get_object(name)
        if value is None or isinstance(value, str):
            return value
        raise _wrong_type(name, value, "text")

    def get_float(self, name: str) -> float | None:
        value = self.get_object(name)
        if value is None:
            return None
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return float(value)
        raise _wrong_type(name, value, "float")

    def get_decimal(self, name: str) -> Decimal | None:
        value = self.get_object(name)
        if value is None or isinstance(value, Decimal):
            return value
        if isinstance(value, bool):
            raise _wrong_type(name, value, "decimal")
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, (float, str)):
            try:
                return Decimal(str(value))
            except InvalidOperation:
                pass
        raise _wrong_type(name, value, "decimal")

    def get_bool(self, name: str) -> bool | None:
        value = self.get_object(name)
        if value is None or isinstance(value, bool):
            return value
        # SQLite stores booleans as 0/1
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise _wrong_type(name, value, "boolean")

    def get_date(self, name: str) -> date | None:
        value = self.get_object(name)
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value[:10])
            except ValueError:
                pass
        raise _wrong_type(name, value, "date")

    def get_datetime(self, name: str) -> datetime | None:
        value = self.get_object(name)
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                pass
        raise _wrong_type(name, value, "datetime")

    def get_bytes(self, name: str) -> bytes | None:
        value = self.get_object(name)
        if value is None or isinstance(value, bytes):
            return value
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        raise _wrong_type(name, value, "bytes")

    def release(self) -> None:
        self._released = True
        self._row = None


class DbApiStatement:
    """Statement handle around one driver cursor."""

    def __init__(
        self,
        raw_cursor: Any,
        sql: str,
        error_types: DriverErrors = (Exception,),
        adapt: Adapter | None = None,
    ):
        self._cursor = raw_cursor
        self._sql = sql
        self._errors = error_types
        self._adapt = adapt
        self._params: dict[int, Any] = {}
        self._released = False

    @property
    def sql(self) -> str:
        return self._sql

    def bind_positional(self, index: int, value: Any) -> None:
        validate_value(index, value)
        self._params[index] = value

    def bind_typed(self, index: int, value: Any, kind: ParamKind) -> None:
        kind = validate_value(index, value, kind)
        if value is not None and isinstance(value, int) and not isinstance(value, bool):
            if kind is ParamKind.FLOAT:
                value = float(value)
            elif kind is ParamKind.DECIMAL:
                value = Decimal(value)
        self._params[index] = value

    def execute_query(self) -> DbApiResultCursor:
        """Run the statement and wrap its result set.

        PEP 249 only reports whether a statement returns rows after running
        it, so a mutating statement sent here has already taken effect (and,
        under autocommit, been committed) when ``ExecutionError`` is raised.
        """
        self._run()
        if self._cursor.description is None:
            raise ExecutionError(
                "Statement did not produce a result set",
                context=ErrorContext(sql=self._sql, phase="execute"),
            )
        return DbApiResultCursor(self._cursor, self._errors)

    def execute_update(self) -> int:
        self._run()
        # Drivers report -1 when the count is not applicable (DDL)
        return max(self._cursor.rowcount, 0)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._cursor.close()

    def _parameters(self) -> tuple[Any, ...]:
        count = max(self._params, default=0)
        missing = [i for i in range(1, count + 1) if i not in self._params]
        if missing:
            raise BindingError(
                f"Parameter {missing[0]} was never bound",
                context=ErrorContext(sql=self._sql, phase="bind", parameter_index=missing[0]),
            )
        values = tuple(self._params[i] for i in range(1, count + 1))
        if self._adapt is not None:
            values = tuple(self._adapt(v) for v in values)
        return values

    def _run(self) -> None:
        if self._released:
            raise ExecutionError("Statement has been released")
        params = self._parameters()
        try:
            if params:
                self._cursor.execute(self._sql, params)
            else:
                self._cursor.execute(self._sql)
        except self._errors as e:
            raise ExecutionError(
                f"Failed to execute statement: {e}",
                cause=e,
                context=ErrorContext(sql=self._sql, phase="execute"),
            ) from e


class DbApiConnection:
    """Connection protocol over a raw PEP 249 connection."""

    def __init__(
        self,
        raw_connection: Any,
        *,
        error_types: DriverErrors = (Exception,),
        adapt: Adapter | None = None,
    ):
        self._conn = raw_connection
        self._errors = error_types
        self._adapt = adapt
        self._released = False

    @property
    def raw(self) -> Any:
        return self._conn

    @property
    def is_released(self) -> bool:
        return self._released

    def prepare(self, sql: str) -> DbApiStatement:
        if self._released:
            raise PreparationError("Connection has been released")
        try:
            raw_cursor = self._conn.cursor()
        except self._errors as e:
            raise PreparationError(
                f"Failed to prepare statement: {e}",
                cause=e,
                context=ErrorContext(sql=sql, phase="prepare"),
            ) from e
        return DbApiStatement(raw_cursor, sql, self._errors, self._adapt)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._conn.close()


def _wrong_type(name: str, value: Any, expected: str) -> MappingError:
    return MappingError(
        f"Column {name} holds {type(value).__name__}, not {expected}",
        column=name,
        value=value,
    )


__all__ = [
    "DbApiConnection",
    "DbApiStatement",
    "DbApiResultCursor",
]
