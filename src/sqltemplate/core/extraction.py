"""Result extraction strategies.

Every extractor here hands the mapper the ordinal the *cursor* reports for
the current row, so mapping logic sees absolute row positions even when a
custom extractor pre-advanced the cursor.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from sqltemplate.core.errors import IncorrectResultSizeError
from sqltemplate.core.protocols import ResultCursor, RowMapper, StatementMode

T = TypeVar("T")


class SingleRowExtractor(Generic[T]):
    """Map the first row, or return ``None`` when there is none.

    Rows after the first are left unread; no "exactly one" check is made.
    """

    mode = StatementMode.QUERY

    def __init__(self, row_mapper: RowMapper[T]):
        self.row_mapper = row_mapper

    def extract(self, cursor: ResultCursor) -> T | None:
        if cursor.advance():
            return self.row_mapper(cursor, cursor.current_row_ordinal())
        return None


class RowListExtractor(Generic[T]):
    """Map every row, in cursor order. No rows gives an empty list."""

    mode = StatementMode.QUERY

    def __init__(self, row_mapper: RowMapper[T]):
        self.row_mapper = row_mapper

    def extract(self, cursor: ResultCursor) -> list[T]:
        results: list[T] = []
        while cursor.advance():
            results.append(self.row_mapper(cursor, cursor.current_row_ordinal()))
        return results


class ExactCountExtractor(RowListExtractor[T]):
    """Map every row and require exactly ``expected`` of them.

    Usage::

        pair = template.query(
            "select * from users where id in (?, ?)",
            ExactCountExtractor(user_mapper, 2),
            1, 3,
        )
    """

    def __init__(self, row_mapper: RowMapper[T], expected: int):
        super().__init__(row_mapper)
        if expected < 0:
            raise ValueError(f"expected must be >= 0, got {expected}")
        self.expected = expected

    def extract(self, cursor: ResultCursor) -> list[T]:
        results = super().extract(cursor)
        if len(results) != self.expected:
            raise IncorrectResultSizeError(self.expected, len(results))
        return results


class AffectedRowCount:
    """Marker extractor: run as an update and return the affected-row count.

    The template never calls ``extract`` on an update-mode extractor.
    """

    mode = StatementMode.UPDATE

    def extract(self, cursor: ResultCursor) -> int:
        raise TypeError("AffectedRowCount does not read cursors")

    def __repr__(self) -> str:
        return "AFFECTED_ROWS"


AFFECTED_ROWS = AffectedRowCount()


__all__ = [
    "SingleRowExtractor",
    "RowListExtractor",
    "ExactCountExtractor",
    "AffectedRowCount",
    "AFFECTED_ROWS",
]
