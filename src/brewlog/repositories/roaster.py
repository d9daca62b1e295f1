"""Roaster data-access layer.

Pure query functions: no business logic, no HTTP concerns.
"""

from typing import Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.listing import ListRequest, Page
from brewlog.models import Roast, Roaster
from brewlog.repositories.pagination import SearchFilter, directed, paginate
from brewlog.schemas.roaster import RoasterSortKey

_ORDER_COLUMNS: dict[RoasterSortKey, tuple[ColumnElement[Any], ...]] = {
    RoasterSortKey.CREATED_AT: (Roaster.created_at, Roaster.id),
    RoasterSortKey.NAME: (func.lower(Roaster.name), Roaster.id),
    RoasterSortKey.COUNTRY: (func.lower(Roaster.country), func.lower(Roaster.name)),
    RoasterSortKey.CITY: (func.lower(func.coalesce(Roaster.city, "")), func.lower(Roaster.name)),
}

SEARCH_COLUMNS = (Roaster.name, Roaster.country, Roaster.city)


async def list_roasters(
    db: AsyncSession, request: ListRequest[RoasterSortKey], search: str | None = None
) -> Page[Roaster]:
    """Return one page of roasters, filtered by ``search`` across name/country/city."""
    order_by = directed(_ORDER_COLUMNS[request.sort_key], request.sort_direction)
    return await paginate(
        db,
        select(Roaster),
        request,
        order_by,
        SearchFilter.build(search, SEARCH_COLUMNS),
    )


async def get_roaster(db: AsyncSession, roaster_id: int) -> Roaster | None:
    return await db.get(Roaster, roaster_id)


async def slug_exists(db: AsyncSession, slug: str, exclude_id: int | None = None) -> bool:
    stmt = select(Roaster.id).where(Roaster.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Roaster.id != exclude_id)
    return (await db.execute(stmt.limit(1))).first() is not None


async def add_roaster(db: AsyncSession, roaster: Roaster) -> Roaster:
    """Insert and reload so server defaults (created_at) are populated."""
    db.add(roaster)
    await db.flush()
    await db.refresh(roaster)
    return roaster


async def save_roaster(db: AsyncSession, roaster: Roaster, changes: dict[str, Any]) -> Roaster:
    for field, value in changes.items():
        setattr(roaster, field, value)
    await db.flush()
    await db.refresh(roaster)
    return roaster


async def delete_roaster(db: AsyncSession, roaster: Roaster) -> None:
    await db.delete(roaster)
    await db.flush()


async def count_roasts(db: AsyncSession, roaster_id: int) -> int:
    """Number of roasts still pointing at this roaster."""
    stmt = select(func.count(Roast.id)).where(Roast.roaster_id == roaster_id)
    return (await db.execute(stmt)).scalar_one()
