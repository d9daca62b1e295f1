"""Roaster endpoints.

HTML pages live under ``/roasters``; the JSON API and all mutations live
under ``/api/roasters``. Mutations answer each client in its own shape via
``negotiate``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from brewlog.config import settings
from brewlog.dependencies import DB, Extractor, Hypermedia, ListParams, Recorder, referred_from
from brewlog.listing import ListRequest
from brewlog.logging import get_logger
from brewlog.navigation import ListNavigator
from brewlog.payload import FlexiblePayload, flexible_payload
from brewlog.responses import Fragment, negotiate, render_fragment, render_signals
from brewlog.schemas.pagination import PaginatedResponse
from brewlog.schemas.roaster import (
    NewRoasterSubmission,
    RoasterResponse,
    RoasterSortKey,
    RoasterView,
    UpdateRoasterSubmission,
)
from brewlog.services import roaster as service
from brewlog.services.extraction import ExtractionInput
from brewlog.services.usage import UsageRecord
from brewlog.templating import render

router = APIRouter()
logger = get_logger(__name__)

EXTRACT_ENDPOINT = "extract-roaster"

NewRoasterPayload = Annotated[
    FlexiblePayload[NewRoasterSubmission], Depends(flexible_payload(NewRoasterSubmission))
]
UpdateRoasterPayload = Annotated[
    FlexiblePayload[UpdateRoasterSubmission], Depends(flexible_payload(UpdateRoasterSubmission))
]
ExtractionPayload = Annotated[
    FlexiblePayload[ExtractionInput], Depends(flexible_payload(ExtractionInput))
]


def _list_request(params: ListParams) -> tuple[ListRequest[RoasterSortKey], str | None]:
    return params.into_request_and_search(RoasterSortKey, settings.default_page_size)


async def render_roaster_list(
    db: DB, list_request: ListRequest[RoasterSortKey], search: str | None
) -> Fragment:
    roasters, navigator = await service.load_roaster_page(db, list_request, search)
    return render_fragment(
        "roasters/_list.html",
        service.ROASTER_LIST_SELECTOR,
        roasters=roasters,
        navigator=navigator,
    )


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@router.get("/roasters", response_class=HTMLResponse)
async def roasters_page(db: DB, params: ListParams, hypermedia: Hypermedia) -> Response:
    """Full page for browsers; just the list fragment for the hypermedia client."""
    list_request, search = _list_request(params)
    if hypermedia:
        return (await render_roaster_list(db, list_request, search)).to_response()

    roasters, navigator = await service.load_roaster_page(db, list_request, search)
    return HTMLResponse(render("roasters/index.html", roasters=roasters, navigator=navigator))


@router.get("/roasters/{roaster_id}", response_class=HTMLResponse)
async def roaster_page(db: DB, roaster_id: int) -> HTMLResponse:
    roaster = await service.get_roaster(db, roaster_id)
    return HTMLResponse(render("roasters/detail.html", roaster=RoasterView.from_model(roaster)))


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@router.get("/api/roasters", response_model=PaginatedResponse[RoasterResponse])
async def list_roasters(db: DB, params: ListParams) -> PaginatedResponse[RoasterResponse]:
    list_request, search = _list_request(params)
    page = await service.list_roasters(db, list_request, search)
    return PaginatedResponse[RoasterResponse].model_validate(page)


@router.get("/api/roasters/{roaster_id}", response_model=RoasterResponse)
async def get_roaster(db: DB, roaster_id: int) -> RoasterResponse:
    return RoasterResponse.model_validate(await service.get_roaster(db, roaster_id))


@router.post("/api/roasters", status_code=201)
async def create_roaster(
    request: Request,
    db: DB,
    params: ListParams,
    hypermedia: Hypermedia,
    payload: NewRoasterPayload,
) -> Response:
    """Create a roaster.

    - hypermedia from the list page: re-rendered list fragment
    - hypermedia elsewhere: script redirect to the new roaster's page
    - form post: 303 to page 1 of the list, keeping sort and search
    - JSON: 201 with the roaster
    """
    submission, source = payload.into_parts()
    list_request, search = _list_request(params)
    roaster = await service.create_roaster(db, submission)

    list_url = ListNavigator(
        service.ROASTER_PAGE_PATH, service.ROASTER_FRAGMENT_PATH, list_request, search
    ).page_href(1)
    from_list = referred_from(request, service.ROASTER_PAGE_PATH)

    result = await negotiate(
        hypermedia=hypermedia,
        source=source,
        redirect_to=list_url,
        navigate_to=f"{service.ROASTER_PAGE_PATH}/{roaster.id}",
        body=RoasterResponse.model_validate(roaster),
        status_code=201,
        fragment=(lambda: render_roaster_list(db, list_request, search)) if from_list else None,
    )
    return result.to_response()


@router.put("/api/roasters/{roaster_id}")
async def update_roaster(
    db: DB, roaster_id: int, hypermedia: Hypermedia, payload: UpdateRoasterPayload
) -> Response:
    submission, source = payload.into_parts()
    roaster = await service.update_roaster(db, roaster_id, submission)
    result = await negotiate(
        hypermedia=hypermedia,
        source=source,
        redirect_to=f"{service.ROASTER_PAGE_PATH}/{roaster.id}",
        body=RoasterResponse.model_validate(roaster),
        status_code=200,
    )
    return result.to_response()


@router.delete("/api/roasters/{roaster_id}", status_code=204)
async def delete_roaster(
    request: Request, db: DB, roaster_id: int, params: ListParams, hypermedia: Hypermedia
) -> Response:
    """Delete a roaster that has no roasts; 409 otherwise."""
    await service.delete_roaster(db, roaster_id)
    list_request, search = _list_request(params)
    from_list = referred_from(request, service.ROASTER_PAGE_PATH)

    result = await negotiate(
        hypermedia=hypermedia,
        source=None,
        redirect_to=service.ROASTER_PAGE_PATH,
        body=None,
        status_code=204,
        fragment=(lambda: render_roaster_list(db, list_request, search)) if from_list else None,
    )
    return result.to_response()


@router.post("/api/roasters/extract")
async def extract_roaster(
    hypermedia: Hypermedia,
    payload: ExtractionPayload,
    extractor: Extractor,
    recorder: Recorder,
) -> Response:
    """Fill the create form from a description or photo.

    The hypermedia client gets signals it merges into the form; others get
    the extracted fields as JSON.
    """
    data, _ = payload.into_parts()
    roaster, usage = await extractor.extract_roaster(data)
    recorder.record(UsageRecord(model=extractor.model, endpoint=EXTRACT_ENDPOINT, usage=usage))

    if hypermedia:
        return render_signals(roaster.signal_pairs())
    return JSONResponse(roaster.model_dump())
