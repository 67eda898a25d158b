"""Shared fixtures for generator and query-interface tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from mysql_schema_toolkit import MySQLQueryGenerator, MySQLQueryInterface


@pytest.fixture
def generator() -> MySQLQueryGenerator:
    return MySQLQueryGenerator()


@pytest.fixture
def executor() -> AsyncMock:
    """Execution channel returning no rows unless a test says otherwise."""
    mock = AsyncMock()
    mock.submit.return_value = []
    return mock


@pytest.fixture
def query_interface(executor: AsyncMock) -> MySQLQueryInterface:
    return MySQLQueryInterface(executor)
