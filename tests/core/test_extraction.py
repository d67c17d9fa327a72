"""Tests for ``sqltemplate.core.extraction`` and ``sqltemplate.core.mappers``."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sqltemplate.core.errors import IncorrectResultSizeError, MappingError
from sqltemplate.core.extraction import (
    AFFECTED_ROWS,
    AffectedRowCount,
    ExactCountExtractor,
    RowListExtractor,
    SingleRowExtractor,
)
from sqltemplate.core.mappers import ColumnMapper, DictRowMapper
from sqltemplate.core.protocols import StatementMode


def cursor_with_rows(*rows: dict) -> MagicMock:
    """Mock cursor that walks ``rows`` with 1-based ordinals."""
    cursor = MagicMock()
    position = {"row": 0}

    def advance():
        if position["row"] < len(rows):
            position["row"] += 1
            return True
        return False

    cursor.advance.side_effect = advance
    cursor.current_row_ordinal.side_effect = lambda: position["row"]
    cursor.column_names.return_value = list(rows[0]) if rows else []
    cursor.get_object.side_effect = lambda name: rows[position["row"] - 1][name]
    return cursor


def ordinal_mapper(cursor, row_ordinal):
    return row_ordinal, cursor.get_object("id")


class TestSingleRowExtractor:
    def test_first_row(self):
        cursor = cursor_with_rows({"id": 10}, {"id": 20})

        assert SingleRowExtractor(ordinal_mapper).extract(cursor) == (1, 10)
        assert cursor.advance.call_count == 1

    def test_no_rows(self):
        assert SingleRowExtractor(ordinal_mapper).extract(cursor_with_rows()) is None

    def test_mode(self):
        assert SingleRowExtractor(ordinal_mapper).mode is StatementMode.QUERY


class TestRowListExtractor:
    def test_all_rows_in_order(self):
        cursor = cursor_with_rows({"id": 10}, {"id": 20}, {"id": 30})

        assert RowListExtractor(ordinal_mapper).extract(cursor) == [(1, 10), (2, 20), (3, 30)]

    def test_no_rows(self):
        assert RowListExtractor(ordinal_mapper).extract(cursor_with_rows()) == []


class TestExactCountExtractor:
    def test_matching_count(self):
        cursor = cursor_with_rows({"id": 1}, {"id": 3})

        assert ExactCountExtractor(ordinal_mapper, 2).extract(cursor) == [(1, 1), (2, 3)]

    def test_too_few(self):
        with pytest.raises(IncorrectResultSizeError) as exc_info:
            ExactCountExtractor(ordinal_mapper, 2).extract(cursor_with_rows({"id": 1}))
        assert (exc_info.value.expected, exc_info.value.actual) == (2, 1)

    def test_too_many(self):
        cursor = cursor_with_rows({"id": 1}, {"id": 2}, {"id": 3})
        with pytest.raises(IncorrectResultSizeError):
            ExactCountExtractor(ordinal_mapper, 2).extract(cursor)

    def test_zero_expected(self):
        assert ExactCountExtractor(ordinal_mapper, 0).extract(cursor_with_rows()) == []

    def test_negative_expected(self):
        with pytest.raises(ValueError):
            ExactCountExtractor(ordinal_mapper, -1)


class TestAffectedRows:
    def test_marker(self):
        assert isinstance(AFFECTED_ROWS, AffectedRowCount)
        assert AFFECTED_ROWS.mode is StatementMode.UPDATE
        assert repr(AFFECTED_ROWS) == "AFFECTED_ROWS"

    def test_never_reads_cursor(self):
        with pytest.raises(TypeError):
            AFFECTED_ROWS.extract(MagicMock())


class TestDictRowMapper:
    def test_maps_all_columns(self):
        cursor = cursor_with_rows({"id": 1, "account": "gugu"})
        cursor.advance()

        assert DictRowMapper()(cursor, 1) == {"id": 1, "account": "gugu"}


class TestColumnMapper:
    def test_named_column(self):
        cursor = cursor_with_rows({"id": 1, "account": "gugu"})
        cursor.advance()

        assert ColumnMapper("account")(cursor, 1) == "gugu"

    def test_defaults_to_first_column(self):
        cursor = cursor_with_rows({"count": 3, "other": 0})
        cursor.advance()

        assert ColumnMapper()(cursor, 1) == 3

    def test_no_columns(self):
        cursor = MagicMock()
        cursor.column_names.return_value = []

        with pytest.raises(MappingError, match="no columns"):
            ColumnMapper()(cursor, 1)
