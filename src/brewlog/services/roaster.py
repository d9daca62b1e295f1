"""Roaster business logic.

Slug assignment, duplicate detection and the "still has roasts" guard live
here; repositories only run queries and routers only shape responses.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.exceptions import ConflictError, NotFoundError, ValidationError
from brewlog.listing import ListRequest, Page
from brewlog.logging import get_logger
from brewlog.models import Roaster
from brewlog.navigation import ListNavigator, build_page_view
from brewlog.repositories import roaster as repo
from brewlog.schemas.pagination import Paginated
from brewlog.schemas.roaster import (
    NewRoasterSubmission,
    RoasterSortKey,
    RoasterView,
    UpdateRoasterSubmission,
)
from brewlog.slugs import slugify

ROASTER_PAGE_PATH = "/roasters"
ROASTER_LIST_SELECTOR = "#roaster-list"
ROASTER_FRAGMENT_PATH = f"{ROASTER_PAGE_PATH}{ROASTER_LIST_SELECTOR}"

logger = get_logger(__name__)


async def load_roaster_page(
    db: AsyncSession, request: ListRequest[RoasterSortKey], search: str | None = None
) -> tuple[Paginated[RoasterView], ListNavigator[RoasterSortKey]]:
    page = await repo.list_roasters(db, request, search)
    return build_page_view(
        page, request, RoasterView.from_model, ROASTER_PAGE_PATH, ROASTER_FRAGMENT_PATH, search
    )


async def get_roaster(db: AsyncSession, roaster_id: int) -> Roaster:
    roaster = await repo.get_roaster(db, roaster_id)
    if roaster is None:
        raise NotFoundError("Roaster", roaster_id)
    return roaster


async def create_roaster(db: AsyncSession, submission: NewRoasterSubmission) -> Roaster:
    """Insert a roaster; a name that slugs to an existing roaster's slug is a conflict."""
    slug = slugify(submission.name)
    if await repo.slug_exists(db, slug):
        raise ConflictError(f"a roaster named '{submission.name}' already exists")

    roaster = await repo.add_roaster(db, Roaster(slug=slug, **submission.model_dump()))
    logger.info("roaster_created", roaster_id=roaster.id, slug=roaster.slug)
    return roaster


async def update_roaster(
    db: AsyncSession, roaster_id: int, submission: UpdateRoasterSubmission
) -> Roaster:
    """Apply the supplied fields; renaming re-derives the slug.

    Raises:
        ValidationError: nothing to change.
        NotFoundError: unknown id.
        ConflictError: new name collides with another roaster.
    """
    changes: dict[str, str] = submission.changes()
    if not changes:
        raise ValidationError("no changes provided")

    roaster = await get_roaster(db, roaster_id)
    if "name" in changes:
        slug = slugify(changes["name"])
        if await repo.slug_exists(db, slug, exclude_id=roaster.id):
            raise ConflictError(f"a roaster named '{changes['name']}' already exists")
        changes["slug"] = slug

    roaster = await repo.save_roaster(db, roaster, changes)
    logger.info("roaster_updated", roaster_id=roaster.id, fields=sorted(changes))
    return roaster


async def delete_roaster(db: AsyncSession, roaster_id: int) -> None:
    roaster = await get_roaster(db, roaster_id)
    roasts = await repo.count_roasts(db, roaster.id)
    if roasts:
        raise ConflictError(f"roaster '{roaster.name}' still has {roasts} roast(s)")
    await repo.delete_roaster(db, roaster)
    logger.info("roaster_deleted", roaster_id=roaster_id)


async def list_roasters(
    db: AsyncSession, request: ListRequest[RoasterSortKey], search: str | None = None
) -> Page[Roaster]:
    return await repo.list_roasters(db, request, search)
