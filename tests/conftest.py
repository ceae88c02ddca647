"""
Shared pytest fixtures.

Storage fixtures cover the in-memory adapter and the SQL adapter on an
in-memory SQLite database. No test needs a live database or network.
"""

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from artfolio.domain.portfolio.ports import USERS, StorageGateway
from artfolio.infrastructure.portfolio.memory_storage import InMemoryStorageAdapter
from artfolio.infrastructure.portfolio.sql_storage import SqlStorageAdapter

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def memory_storage() -> InMemoryStorageAdapter:
    return InMemoryStorageAdapter()


@pytest.fixture
def sql_storage():
    storage = SqlStorageAdapter.from_url("sqlite://")
    storage.ensure_schema()
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sql"])
def storage(request: pytest.FixtureRequest) -> StorageGateway:
    """Each test using this fixture runs once per storage backend."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def make_user(storage: StorageGateway) -> Callable[..., dict[str, Any]]:
    """Insert a user row and return it."""

    def _make_user(user_id: str = "user-1", **fields: Any) -> dict[str, Any]:
        row = {
            "id": user_id,
            "email": f"{user_id}@example.com",
            "full_name": None,
            "username": user_id,
            "profile_image_url": None,
            "created_at": BASE_TIME,
            **fields,
        }
        return storage.insert(USERS, row)

    return _make_user
