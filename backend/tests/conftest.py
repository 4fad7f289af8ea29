"""
Users API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked collection, in-memory
       MongoDB, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection: AsyncMock-backed Motor collection (service unit tests)
    ├── database: Database wrapping an in-memory mongomock-motor client
    ├── app: FastAPI app serving from `database`
    └── test_client: HTTPX AsyncClient bound to `app`
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings BEFORE any users_api imports
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "users_api_test"
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    Provides a mock Motor collection.

    Motor's single-document methods are coroutines; `find()` is synchronous
    and returns a cursor whose `to_list()` is a coroutine.

    Usage:
        async def test_get_user(mock_collection):
            mock_collection.find_one.return_value = {"_id": oid, "name": "Alice"}
            result = await UserService(mock_collection).get_user(str(oid))
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def database():
    """A Database whose client is an in-memory MongoDB (mongomock-motor)."""
    from users_api.database import Database

    return Database(
        url="mongodb://localhost:27017",
        name="users_api_test",
        client=AsyncMongoMockClient(),
    )


@pytest.fixture
def app(database):
    from users_api.main import create_app

    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app. The lifespan
    handler does not run, so the injected `database` is used unconnected.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def alice():
    return {"name": "Alice", "age": 30}
