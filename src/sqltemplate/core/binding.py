"""Parameter binding strategies.

``PositionalBinder`` is the default used by the template's convenience
methods: value *i* of the input goes to placeholder *i + 1* through the
statement's generic ``bind_positional``. ``TypedBinder`` goes through
``bind_typed`` instead, for callers who want the driver told the kind.

Values are checked at this boundary. Anything outside the supported kinds
raises ``BindingError`` here rather than being left for the driver to
interpret.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from sqltemplate.core.errors import BindingError
from sqltemplate.core.protocols import Statement


class ParamKind(str, Enum):
    """Kinds of value a statement parameter may hold."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"

    @classmethod
    def of(cls, value: Any) -> ParamKind:
        """Classify ``value``; raises ``BindingError`` for unsupported types."""
        if value is None:
            return cls.NULL
        # bool before int, datetime before date: both are subclasses
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, Decimal):
            return cls.DECIMAL
        if isinstance(value, str):
            return cls.TEXT
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls.BYTES
        if isinstance(value, datetime):
            return cls.DATETIME
        if isinstance(value, date):
            return cls.DATE
        if isinstance(value, time):
            return cls.TIME
        raise BindingError(
            f"Unsupported parameter type: {type(value).__name__}"
        ).with_context(value_type=type(value).__name__)

    def accepts(self, value: Any) -> bool:
        """Whether ``value`` may be bound as this kind. ``None`` always may."""
        actual = ParamKind.of(value)
        if actual is ParamKind.NULL or actual is self:
            return True
        # Integers widen to floating point and decimal
        return actual is ParamKind.INTEGER and self in (ParamKind.FLOAT, ParamKind.DECIMAL)


def check_index(index: int) -> None:
    """Reject bind indices that are not positive ints."""
    if isinstance(index, bool) or not isinstance(index, int) or index < 1:
        raise BindingError(f"Parameter index must be a positive integer, got {index!r}")


def validate_value(index: int, value: Any, kind: ParamKind | None = None) -> ParamKind:
    """Validate one bind value and return its kind.

    With ``kind`` given, the value must also be acceptable for that kind.
    """
    check_index(index)
    try:
        actual = ParamKind.of(value)
    except BindingError as e:
        e.with_context(parameter_index=index)
        raise
    if kind is not None:
        kind = ParamKind(kind)
        if not kind.accepts(value):
            raise BindingError(
                f"Parameter {index} declared {kind.value} but got {actual.value}"
            ).with_context(parameter_index=index)
        return kind
    return actual


class PositionalBinder:
    """Bind ``params`` in order: index ``i + 1`` receives ``params[i]``."""

    def __init__(self, params: Iterable[Any] = ()):
        self._params: tuple[Any, ...] = tuple(params)
        for index, value in enumerate(self._params, start=1):
            validate_value(index, value)

    @property
    def params(self) -> tuple[Any, ...]:
        return self._params

    def bind(self, statement: Statement) -> None:
        for index, value in enumerate(self._params, start=1):
            statement.bind_positional(index, value)

    def __repr__(self) -> str:
        return f"PositionalBinder({list(self._params)!r})"


class TypedBinder:
    """Bind ``(value, kind)`` pairs in order through ``bind_typed``.

    Usage::

        binder = TypedBinder([(1, ParamKind.INTEGER), (3, ParamKind.INTEGER)])
    """

    def __init__(self, params: Sequence[tuple[Any, ParamKind]]):
        self._params = [(value, ParamKind(kind)) for value, kind in params]
        for index, (value, kind) in enumerate(self._params, start=1):
            validate_value(index, value, kind)

    def bind(self, statement: Statement) -> None:
        for index, (value, kind) in enumerate(self._params, start=1):
            statement.bind_typed(index, value, kind)


__all__ = [
    "ParamKind",
    "PositionalBinder",
    "TypedBinder",
    "check_index",
    "validate_value",
]
