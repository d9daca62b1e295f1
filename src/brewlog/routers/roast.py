"""Roast endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from brewlog.config import settings
from brewlog.dependencies import DB, Hypermedia, ListParams, referred_from
from brewlog.listing import ListRequest
from brewlog.navigation import ListNavigator
from brewlog.payload import FlexiblePayload, flexible_payload
from brewlog.responses import Fragment, negotiate, render_fragment
from brewlog.schemas.pagination import PaginatedResponse
from brewlog.schemas.roast import NewRoastSubmission, RoastResponse, RoastSortKey
from brewlog.services import roast as service
from brewlog.templating import render

router = APIRouter()

NewRoastPayload = Annotated[
    FlexiblePayload[NewRoastSubmission], Depends(flexible_payload(NewRoastSubmission))
]


def _list_request(params: ListParams) -> tuple[ListRequest[RoastSortKey], str | None]:
    return params.into_request_and_search(RoastSortKey, settings.default_page_size)


async def render_roast_list(
    db: DB, list_request: ListRequest[RoastSortKey], search: str | None
) -> Fragment:
    roasts, navigator = await service.load_roast_page(db, list_request, search)
    return render_fragment(
        "roasts/_list.html", service.ROAST_LIST_SELECTOR, roasts=roasts, navigator=navigator
    )


@router.get("/roasts", response_class=HTMLResponse)
async def roasts_page(db: DB, params: ListParams, hypermedia: Hypermedia) -> Response:
    list_request, search = _list_request(params)
    if hypermedia:
        return (await render_roast_list(db, list_request, search)).to_response()

    roasts, navigator = await service.load_roast_page(db, list_request, search)
    return HTMLResponse(render("roasts/index.html", roasts=roasts, navigator=navigator))


@router.get("/api/roasts", response_model=PaginatedResponse[RoastResponse])
async def list_roasts(db: DB, params: ListParams) -> PaginatedResponse[RoastResponse]:
    list_request, search = _list_request(params)
    page = await service.list_roasts(db, list_request, search)
    return PaginatedResponse[RoastResponse].model_validate(page)


@router.post("/api/roasts", status_code=201)
async def create_roast(
    request: Request,
    db: DB,
    params: ListParams,
    hypermedia: Hypermedia,
    payload: NewRoastPayload,
) -> Response:
    """Create a roast for an existing roaster (404 when the roaster is unknown)."""
    submission, source = payload.into_parts()
    list_request, search = _list_request(params)
    roast = await service.create_roast(db, submission)

    list_url = ListNavigator(
        service.ROAST_PAGE_PATH, service.ROAST_FRAGMENT_PATH, list_request, search
    ).page_href(1)
    from_list = referred_from(request, service.ROAST_PAGE_PATH)

    result = await negotiate(
        hypermedia=hypermedia,
        source=source,
        redirect_to=list_url,
        body=RoastResponse.model_validate(roast),
        status_code=201,
        fragment=(lambda: render_roast_list(db, list_request, search)) if from_list else None,
    )
    return result.to_response()
