"""Reusable row mappers."""

from __future__ import annotations

from typing import Any

from sqltemplate.core.errors import MappingError
from sqltemplate.core.protocols import ResultCursor


class DictRowMapper:
    """Map the current row to ``{column_name: value}``."""

    def __call__(self, cursor: ResultCursor, row_ordinal: int) -> dict[str, Any]:
        return {name: cursor.get_object(name) for name in cursor.column_names()}


class ColumnMapper:
    """Map the current row to the value of a single column.

    With no ``column`` the first column of the result is used, which is what
    scalar queries such as ``select count(*) from users`` need.
    """

    def __init__(self, column: str | None = None):
        self.column = column

    def __call__(self, cursor: ResultCursor, row_ordinal: int) -> Any:
        name = self.column
        if name is None:
            names = cursor.column_names()
            if not names:
                raise MappingError("Result has no columns")
            name = names[0]
        return cursor.get_object(name)


__all__ = [
    "DictRowMapper",
    "ColumnMapper",
]
