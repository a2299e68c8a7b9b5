"""
SplitLedger Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own in-memory SQLite database (aiosqlite) built
       through the same `Database` handle the application uses.

Fixtures:
    ├── database:        fresh in-memory Database with all tables created
    ├── db_session:      AsyncSession on that database
    ├── mock_db_session: AsyncMock session for failure injection
    ├── register_user:   helper coroutine registering a user via UserService
    └── test_client:     HTTPX AsyncClient bound to an app using `database`
"""

import os

# Must be set before any splitledger import reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DB_CREATE_ALL"] = "false"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from splitledger.database import Database  # noqa: E402
from splitledger.schemas.user import UserCreate  # noqa: E402
from splitledger.services.user_service import UserService  # noqa: E402


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock standing in for AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = RuntimeError("connection lost")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def register_user(db_session):
    """
    Returns a coroutine function that registers a user and returns its id.

    Mobile numbers are generated from a counter so several users can be
    created in one test without clashing.
    """
    service = UserService()
    counter = {"n": 0}

    async def _register(name="Alice", email=None, mobile_number=None, password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        payload = UserCreate(
            name=name,
            email=email or f"{name.lower()}{n}@example.com",
            mobile_number=mobile_number or f"{9000000000 + n}",
            password=password,
        )
        created = await service.register(db_session, payload)
        return created.user_id

    return _register


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to an app bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from splitledger.main import create_app

    app = create_app(database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
