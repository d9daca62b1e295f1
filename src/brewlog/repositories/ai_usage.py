"""AI usage data-access layer."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.models import AiUsage


async def insert_usage(db: AsyncSession, usage: AiUsage) -> None:
    db.add(usage)
    await db.flush()


async def count_usage(db: AsyncSession, endpoint: str | None = None) -> int:
    stmt = select(func.count(AiUsage.id))
    if endpoint is not None:
        stmt = stmt.where(AiUsage.endpoint == endpoint)
    return (await db.execute(stmt)).scalar_one()
