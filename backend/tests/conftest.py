"""
AwardBoard Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Settings are read from the environment at import time, so the
       overrides below run before anything from `awardboard` is imported.

Fixture Hierarchy:
    Autouse (every test):
    └── reset_memory_state: empty session store and rate limiter

    Function-scoped:
    ├── database: creates the tables in a throwaway SQLite file, drops them after
    ├── db_session: AsyncSession on that database
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── test_client: HTTPX AsyncClient wired to the app via ASGITransport
    ├── client_factory: extra independent clients (separate cookie jars)
    ├── sign_in: helper that signs a client up and logs it in
    └── alice_client: test_client already signed up and logged in as alice
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

_db_dir = tempfile.mkdtemp(prefix="awardboard_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ACCESS_LOG_PATH", None)

from awardboard.database import async_session_factory, drop_models, init_models  # noqa: E402
from awardboard.services.rate_limiter import home_rate_limiter  # noqa: E402
from awardboard.services.session_store import session_store  # noqa: E402

ALICE = ("alice", "wonderland")
BOB = ("bob", "builder")


@pytest.fixture(autouse=True)
def reset_memory_state():
    session_store.clear()
    home_rate_limiter.reset()
    yield
    session_store.clear()
    home_rate_limiter.reset()


@pytest_asyncio.fixture
async def database():
    await init_models()
    yield
    await drop_models()


@pytest_asyncio.fixture
async def db_session(database):
    """
    A real AsyncSession on the test database.

    Usage:
        async def test_create(db_session):
            await credential_store.create_user(db_session, "alice", "pw")
    """
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


def _new_client() -> AsyncClient:
    from awardboard.main import app

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def test_client(database):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    async with _new_client() as client:
        yield client


@pytest_asyncio.fixture
async def client_factory(database):
    clients = []

    def make() -> AsyncClient:
        client = _new_client()
        clients.append(client)
        return client

    yield make

    for client in clients:
        await client.aclose()


async def sign_up_and_log_in(client: AsyncClient, username: str, password: str) -> None:
    response = await client.post("/signup", json={"username": username, "password": password})
    assert response.json() == {"status": "success"}
    response = await client.post("/login", json={"username": username, "password": password})
    assert response.json() == {"status": 200}


@pytest.fixture
def sign_in():
    return sign_up_and_log_in


@pytest_asyncio.fixture
async def alice_client(test_client):
    await sign_up_and_log_in(test_client, *ALICE)
    return test_client
