from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from brewlog.config import settings

# Predictable constraint names; Alembic needs them to diff and to drop constraints in batch mode.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite ships with foreign key enforcement off.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    In-memory databases share one connection (StaticPool); otherwise every
    connection would see its own empty database.
    """
    url = make_url(database_url)
    options: dict[str, Any] = {
        "echo": settings.db_echo,
        "connect_args": {"timeout": settings.db_busy_timeout},
    }
    if url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
        options["connect_args"]["check_same_thread"] = False
    else:
        options.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=settings.db_pool_pre_ping,
        )

    engine = create_async_engine(url, **options)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


engine = build_engine(settings.database_url)

# expire_on_commit=False keeps objects readable after commit without lazy I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Commits on success, rolls back on exception. Services and repositories
    never call commit() or rollback() themselves.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
