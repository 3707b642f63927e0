"""Unit-test fixtures."""

from unittest.mock import AsyncMock

import pytest

from tests.unit.factories import InMemoryShareStore


@pytest.fixture
def store() -> InMemoryShareStore:
    return InMemoryShareStore()


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are awaitable no-ops."""
    return AsyncMock()
