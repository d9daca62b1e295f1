from collections.abc import AsyncIterator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brewlog.db.session import Base, build_engine, get_db
from brewlog.dependencies import get_usage_recorder
from brewlog.main import app
from brewlog.services.extraction import get_extractor
from brewlog.services.usage import UsageRecord, UsageRecorder
from tests.factories import FakeExtractor

# Pytest only picks up fixtures from conftest.py files. Fixtures defined in other
# modules (like tests/seeds.py) are invisible unless we register them here.
pytest_plugins = ["tests.seeds"]

# One shared in-memory connection (StaticPool); tables are created and dropped per test.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = build_engine(TEST_DATABASE_URL)
async_session = async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def recorded() -> list[UsageRecord]:
    return []


@pytest_asyncio.fixture
async def recorder(recorded: list[UsageRecord]) -> AsyncIterator[UsageRecorder]:
    """Usage recorder whose writer collects records in ``recorded``."""

    async def collect(record: UsageRecord) -> None:
        recorded.append(record)

    recorder = UsageRecorder(collect, maxsize=10)
    recorder.start()
    yield recorder
    await recorder.stop()


@pytest_asyncio.fixture
async def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest_asyncio.fixture
async def client(
    db: AsyncSession, recorder: UsageRecorder, extractor: FakeExtractor
) -> AsyncIterator[AsyncClient]:
    """HTTP client that uses the test database session, recorder and extractor."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_usage_recorder] = lambda: recorder
    app.dependency_overrides[get_extractor] = lambda: extractor

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session_factory(db: AsyncSession) -> async_sessionmaker[AsyncSession]:
    """Sessions on the test engine, for code that opens its own (the usage writer)."""
    return async_session
