"""Roast data-access layer."""

from typing import Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from brewlog.listing import ListRequest, Page
from brewlog.models import Roast, Roaster
from brewlog.repositories.pagination import SearchFilter, directed, paginate
from brewlog.schemas.roast import RoastSortKey

_ORDER_COLUMNS: dict[RoastSortKey, tuple[ColumnElement[Any], ...]] = {
    RoastSortKey.CREATED_AT: (Roast.created_at, Roast.id),
    RoastSortKey.NAME: (func.lower(Roast.name), Roast.id),
    RoastSortKey.ROASTER: (func.lower(Roaster.name), func.lower(Roast.name)),
    RoastSortKey.ORIGIN: (func.lower(func.coalesce(Roast.origin, "")), func.lower(Roast.name)),
}

SEARCH_COLUMNS = (Roast.name, Roast.origin, Roaster.name)


async def list_roasts(
    db: AsyncSession, request: ListRequest[RoastSortKey], search: str | None = None
) -> Page[Roast]:
    """Return one page of roasts with their roaster loaded.

    The roaster join is always present so both sorting and searching can use
    the roaster's name.
    """
    stmt = select(Roast).join(Roast.roaster).options(selectinload(Roast.roaster))
    order_by = directed(_ORDER_COLUMNS[request.sort_key], request.sort_direction)
    return await paginate(db, stmt, request, order_by, SearchFilter.build(search, SEARCH_COLUMNS))


async def slug_exists(db: AsyncSession, slug: str) -> bool:
    stmt = select(Roast.id).where(Roast.slug == slug).limit(1)
    return (await db.execute(stmt)).first() is not None


async def add_roast(db: AsyncSession, roast: Roast) -> Roast:
    db.add(roast)
    await db.flush()
    await db.refresh(roast, attribute_names=["created_at", "roaster"])
    return roast
