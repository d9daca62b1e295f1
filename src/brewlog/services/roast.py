"""Roast business logic."""

from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.exceptions import NotFoundError
from brewlog.listing import ListRequest, Page
from brewlog.logging import get_logger
from brewlog.models import Roast
from brewlog.navigation import ListNavigator, build_page_view
from brewlog.repositories import roast as repo
from brewlog.repositories.roaster import get_roaster
from brewlog.schemas.pagination import Paginated
from brewlog.schemas.roast import NewRoastSubmission, RoastSortKey, RoastView
from brewlog.slugs import slugify

ROAST_PAGE_PATH = "/roasts"
ROAST_LIST_SELECTOR = "#roast-list"
ROAST_FRAGMENT_PATH = f"{ROAST_PAGE_PATH}{ROAST_LIST_SELECTOR}"

logger = get_logger(__name__)


async def load_roast_page(
    db: AsyncSession, request: ListRequest[RoastSortKey], search: str | None = None
) -> tuple[Paginated[RoastView], ListNavigator[RoastSortKey]]:
    page = await repo.list_roasts(db, request, search)
    return build_page_view(
        page, request, RoastView.from_model, ROAST_PAGE_PATH, ROAST_FRAGMENT_PATH, search
    )


async def unique_roast_slug(db: AsyncSession, roaster_slug: str, name: str) -> str:
    """``<roaster>-<roast>``, suffixed ``-2``, ``-3``... until unused."""
    base = slugify(f"{roaster_slug} {name}")
    slug, suffix = base, 2
    while await repo.slug_exists(db, slug):
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug


async def create_roast(db: AsyncSession, submission: NewRoastSubmission) -> Roast:
    roaster = await get_roaster(db, submission.roaster_id)
    if roaster is None:
        raise NotFoundError("Roaster", submission.roaster_id)

    slug = await unique_roast_slug(db, roaster.slug, submission.name)
    roast = await repo.add_roast(db, Roast(slug=slug, **submission.model_dump()))
    logger.info("roast_created", roast_id=roast.id, roaster_id=roaster.id, slug=slug)
    return roast


async def list_roasts(
    db: AsyncSession, request: ListRequest[RoastSortKey], search: str | None = None
) -> Page[Roast]:
    return await repo.list_roasts(db, request, search)
