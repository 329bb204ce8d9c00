"""
Pytest fixtures for test database, client, and authentication.

Each test gets freshly created tables that are dropped afterwards.
The default database is a file-backed SQLite database (aiosqlite) so that
concurrent sessions really use separate connections; point
TEST_DATABASE_URL at PostgreSQL to run the same suite against it.
"""

import os
import tempfile
from typing import AsyncGenerator

_TEST_DIR = tempfile.mkdtemp(prefix="bus-wallet-tests-")
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DIR}/bus_wallet_test.db"
)

# Must be set before the app's settings are first read
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ["REDIS_ENABLED"] = "false"
os.environ.setdefault("INITIAL_WALLET_BALANCE", "500")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import create_access_token, hash_password
from app.models.profile import Profile
from app.models.bus import Bus

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory(db_session: AsyncSession) -> async_sessionmaker:
    """Independent sessions (separate connections) for concurrency tests."""
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_profile(
    db: AsyncSession,
    email: str = "test@example.com",
    balance: int = 500,
    password: str = "testpassword123",
) -> Profile:
    profile = Profile(
        name=email.split("@")[0],
        email=email,
        hashed_password=hash_password(password),
        wallet_balance=balance,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def make_bus(db: AsyncSession, code: str, fare: int, **fields) -> Bus:
    bus = Bus(
        bus_code=code,
        name=fields.pop("name", f"Bus {code}"),
        from_city=fields.pop("from_city", "Bengaluru"),
        to_city=fields.pop("to_city", "Mysuru"),
        fare=fare,
        seats_available=fields.pop("seats_available", 40),
    )
    db.add(bus)
    await db.commit()
    await db.refresh(bus)
    return bus


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> Profile:
    """A wallet holding 500."""
    return await make_profile(db_session)


@pytest_asyncio.fixture
async def auth_token(test_user: Profile) -> str:
    return create_access_token(data={"sub": test_user.id})


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def test_bus(db_session: AsyncSession) -> Bus:
    """Bengaluru -> Mysuru, fare 300."""
    return await make_bus(db_session, "KA01-0300", 300, name="Airavat")


@pytest_asyncio.fixture
async def full_fare_bus(db_session: AsyncSession) -> Bus:
    """Chennai -> Bengaluru, fare 500."""
    return await make_bus(
        db_session, "TN07-0500", 500, name="Chennai Express", from_city="Chennai", to_city="Bengaluru"
    )


@pytest_asyncio.fixture
async def pricey_bus(db_session: AsyncSession) -> Bus:
    """Delhi -> Manali, fare 1450."""
    return await make_bus(
        db_session, "DL01-1450", 1450, name="Himachal Volvo", from_city="Delhi", to_city="Manali"
    )


@pytest.fixture
def wallet_factory(db_session: AsyncSession):
    """Create extra wallets: `await wallet_factory("b@example.com", 200)`."""

    async def _make(email: str, balance: int) -> Profile:
        return await make_profile(db_session, email=email, balance=balance)

    return _make


@pytest_asyncio.fixture
async def cheap_bus(db_session: AsyncSession) -> Bus:
    """Mumbai -> Pune, fare 100."""
    return await make_bus(
        db_session, "MH12-0100", 100, name="Shivneri", from_city="Mumbai", to_city="Pune"
    )
