"""Database-level constraints on the models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from brewlog.models import Roast, Roaster
from tests.factories import make_roast, make_roaster

# ---------------------------------------------------------------------------
# 1. Persistence and relationships
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_roaster_loads_its_roasts(seeded_db: AsyncSession) -> None:
    stmt = (
        select(Roaster)
        .where(Roaster.name == "Tim Wendelboe")
        .options(selectinload(Roaster.roasts))
    )
    roaster = (await seeded_db.execute(stmt)).scalar_one()
    assert sorted(roast.name for roast in roaster.roasts) == ["Finca Tamana", "Gesha Village"]
    assert roaster.created_at is not None


# ---------------------------------------------------------------------------
# 2. Constraints
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_roaster_slug_is_unique(db: AsyncSession) -> None:
    db.add(make_roaster(name="Drop Coffee"))
    await db.flush()
    db.add(make_roaster(name="Drop  Coffee!"))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


@pytest.mark.asyncio
async def test_roast_requires_existing_roaster(db: AsyncSession) -> None:
    db.add(Roast(roaster_id=12345, name="Orphan", slug="orphan"))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


@pytest.mark.asyncio
async def test_roaster_with_roasts_cannot_be_deleted(db: AsyncSession) -> None:
    roaster = make_roaster()
    db.add(make_roast(roaster=roaster))
    await db.commit()

    await db.delete(roaster)
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()
