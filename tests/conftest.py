"""
Shared pytest fixtures and configuration for sqltemplate tests.

This module provides:
- A fake driver (factory → connection → statement → cursor) built from mocks,
  with release calls recorded in order
- A ``users`` table in a throwaway SQLite file
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest

# Ensure sqltemplate package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqltemplate import SqlTemplate
from sqltemplate.core.adapters import SQLiteConnectionFactory
from tests._support.users import User


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if "sqlite_db" in getattr(item, "fixturenames", ()):
            item.add_marker(pytest.mark.integration)
        elif not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fake Driver
# =============================================================================


@dataclass
class FakeDriver:
    """Mocked driver objects wired together the way a real driver would be.

    ``releases`` records every ``release()`` as ``cursor_release``,
    ``statement_release`` or ``connection_release``, in call order.
    """

    factory: MagicMock
    connection: MagicMock
    statement: MagicMock
    cursor: MagicMock
    releases: Mock

    def returns_users(self, *users: User) -> None:
        """Make the cursor yield ``users`` in order."""
        self.cursor.advance.side_effect = [True] * len(users) + [False]
        self.cursor.current_row_ordinal.side_effect = list(range(1, len(users) + 1))
        self.cursor.get_long.side_effect = [u.id for u in users]
        self.cursor.get_string.side_effect = [u.account for u in users]

    def release_order(self) -> list[str]:
        return [name for name, _, _ in self.releases.mock_calls]


@pytest.fixture
def fake_driver() -> FakeDriver:
    factory = MagicMock(name="factory")
    connection = MagicMock(name="connection")
    statement = MagicMock(name="statement")
    cursor = MagicMock(name="cursor")

    factory.acquire.return_value = connection
    connection.prepare.return_value = statement
    statement.execute_query.return_value = cursor
    statement.execute_update.return_value = 1
    cursor.advance.return_value = False

    releases = Mock()
    releases.attach_mock(cursor.release, "cursor_release")
    releases.attach_mock(statement.release, "statement_release")
    releases.attach_mock(connection.release, "connection_release")

    return FakeDriver(factory, connection, statement, cursor, releases)


@pytest.fixture
def template(fake_driver: FakeDriver) -> SqlTemplate:
    return SqlTemplate(fake_driver.factory)


# =============================================================================
# SQLite Fixtures
# =============================================================================


@pytest.fixture
def sqlite_db(tmp_path: Path) -> str:
    """Path to a SQLite file holding users gugu, wonny and lisa (ids 1-3)."""
    path = str(tmp_path / "users.db")
    template = SqlTemplate(SQLiteConnectionFactory(path))
    template.update("create table users (id integer primary key, account text not null)")
    for account in ("gugu", "wonny", "lisa"):
        template.update("insert into users (account) values (?)", account)
    return path


@pytest.fixture
def sqlite_template(sqlite_db: str) -> SqlTemplate:
    return SqlTemplate(SQLiteConnectionFactory(sqlite_db))
