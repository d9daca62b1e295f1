"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated
from urllib.parse import urlsplit

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from brewlog.db.session import get_db
from brewlog.responses import is_hypermedia_request
from brewlog.schemas.query import ListQuery
from brewlog.services.extraction import RoasterExtractor, get_extractor
from brewlog.services.usage import UsageRecorder

DB = Annotated[AsyncSession, Depends(get_db)]


def list_query(
    page: Annotated[int | None, Query(ge=0)] = None,
    page_size: Annotated[str | None, Query()] = None,
    sort: Annotated[str | None, Query()] = None,
    dir: Annotated[str | None, Query()] = None,
    q: Annotated[str | None, Query()] = None,
) -> ListQuery:
    """Collect list query parameters.

    ``page_size`` arrives as text so ``"all"`` and numbers share one parser.
    """
    return ListQuery(page=page, page_size=page_size, sort=sort, dir=dir, q=q)


ListParams = Annotated[ListQuery, Depends(list_query)]


def hypermedia_request(request: Request) -> bool:
    return is_hypermedia_request(request.headers)


Hypermedia = Annotated[bool, Depends(hypermedia_request)]


def referred_from(request: Request, path: str) -> bool:
    """True when the Referer header's path is exactly ``path``."""
    referer = request.headers.get("referer")
    if not referer:
        return False
    return urlsplit(referer).path.rstrip("/") == path.rstrip("/")


def get_usage_recorder(request: Request) -> UsageRecorder:
    return request.app.state.usage_recorder


Recorder = Annotated[UsageRecorder, Depends(get_usage_recorder)]
Extractor = Annotated[RoasterExtractor, Depends(get_extractor)]
