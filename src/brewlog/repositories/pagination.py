"""Generic paginated query execution.

Entity repositories build a base ``select``, the ORDER BY for the requested
sort key, and (optionally) a ``SearchFilter``; ``paginate`` does the count,
the slicing and the out-of-range correction, and returns a ``Page``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.listing import ListRequest, Page, SortDirection, SortKey


@dataclass(frozen=True)
class SearchFilter:
    """Case-insensitive substring match of ``term`` against any of ``columns``."""

    term: str
    columns: Sequence[ColumnElement[Any]]

    @classmethod
    def build(
        cls, term: str | None, columns: Sequence[ColumnElement[Any]]
    ) -> "SearchFilter | None":
        term = (term or "").strip().lower()
        if not term:
            return None
        return cls(term=term, columns=columns)

    def apply(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.where(
            or_(
                *(
                    func.lower(column).contains(self.term, autoescape=True)
                    for column in self.columns
                )
            )
        )


def directed(
    columns: Sequence[ColumnElement[Any]], direction: SortDirection
) -> list[ColumnElement[Any]]:
    """Apply one direction to every ORDER BY column (tie-breakers included)."""
    if direction is SortDirection.ASC:
        return [column.asc() for column in columns]
    return [column.desc() for column in columns]


async def _fetch(db: AsyncSession, stmt: Select[Any]) -> list[Any]:
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def paginate[K: SortKey](
    db: AsyncSession,
    stmt: Select[Any],
    request: ListRequest[K],
    order_by: Sequence[ColumnElement[Any]],
    search: SearchFilter | None = None,
) -> Page[Any]:
    """Run ``stmt`` as one page of ``request``.

    ``All`` returns every row as page 1 with ``showing_all`` set. For limited
    sizes, a page past the end that comes back empty is re-fetched as the
    last page, so the caller always gets something to show when rows exist.
    With no matching rows at all the page is reset to 1.
    """
    if search is not None:
        stmt = search.apply(stmt)
    ordered = stmt.order_by(*order_by)

    limit = request.limit
    if limit is None:
        items = await _fetch(db, ordered)
        return Page(items, page=1, page_size=max(len(items), 1), total=len(items), showing_all=True)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    page = request.page
    items = await _fetch(db, ordered.limit(limit).offset(request.offset))
    if page > 1 and not items:
        page = request.ensure_page_within(total).page
        if total > 0:
            items = await _fetch(db, ordered.limit(limit).offset((page - 1) * limit))

    return Page(items, page=page, page_size=limit, total=total, showing_all=False)
