from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sqlkit import ConnectionConfig, Database

pytest_plugins = ["pytest_databases.docker.mysql"]


@pytest.fixture
def mock_cursor() -> MagicMock:
    """Create a mock PyMySQL cursor."""
    cursor = MagicMock()
    cursor.execute.return_value = 1
    cursor.fetchall.return_value = ()
    cursor.rowcount = 0
    cursor.close.return_value = None
    return cursor


@pytest.fixture
def mock_connection(mock_cursor: MagicMock) -> MagicMock:
    """Create a mock PyMySQL connection that reports itself open."""
    connection = MagicMock()
    connection.open = True
    connection.cursor.return_value = mock_cursor
    return connection


@pytest.fixture
def connection_factory(mock_connection: MagicMock) -> MagicMock:
    """Stand-in for ``pymysql.connect`` returning the mock connection."""
    return MagicMock(return_value=mock_connection)


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(name="test", username="app", password="secret", database="shop")


@pytest.fixture
def database(config: ConnectionConfig, connection_factory: MagicMock) -> Database:
    return Database(config, connection_factory=connection_factory)
