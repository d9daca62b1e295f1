"""Response shapes for the three kinds of client.

The hypermedia client (Datastar) marks its requests with ``datastar-request:
true`` and expects small HTML patches addressed by two response headers: a CSS
selector and a merge mode. It has no redirect instruction, so navigation is
done by appending a ``<script>`` to ``body``. Plain browsers posting forms get
a 303 redirect. Typed API clients get JSON.

Each shape is one variant of ``MutationResponse``; ``negotiate`` applies the
decision table and ``to_response()`` produces the Starlette response.
"""

import json
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from brewlog.payload import PayloadSource
from brewlog.templating import render

HYPERMEDIA_REQUEST_HEADER = "datastar-request"
SELECTOR_HEADER = "datastar-selector"
MODE_HEADER = "datastar-mode"


class PatchMode(StrEnum):
    REPLACE = "replace"
    INNER = "inner"
    APPEND = "append"


def is_hypermedia_request(headers: Mapping[str, str]) -> bool:
    return headers.get(HYPERMEDIA_REQUEST_HEADER, "").lower() == "true"


def patch_headers(selector: str, mode: PatchMode) -> dict[str, str]:
    return {SELECTOR_HEADER: selector, MODE_HEADER: mode.value}


def script_string(value: str) -> str:
    """JSON-encode ``value`` for interpolation inside a ``<script>`` element.

    ``<``, ``>`` and ``&`` are escaped too, so a crafted URL cannot close the
    element or open a comment.
    """
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


@dataclass(frozen=True)
class Fragment:
    """HTML patch for an element already on the page."""

    selector: str
    html: str
    mode: PatchMode = PatchMode.REPLACE

    def to_response(self) -> Response:
        return HTMLResponse(self.html, headers=patch_headers(self.selector, self.mode))


@dataclass(frozen=True)
class ScriptRedirect:
    """Client-side navigation for the hypermedia client."""

    url: str
    script: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "script", f"<script>window.location.href = {script_string(self.url)};</script>"
        )

    def to_response(self) -> Response:
        return HTMLResponse(self.script, headers=patch_headers("body", PatchMode.APPEND))


@dataclass(frozen=True)
class HttpRedirect:
    url: str
    status_code: int = 303

    def to_response(self) -> Response:
        return RedirectResponse(self.url, status_code=self.status_code)


@dataclass(frozen=True)
class JsonBody:
    body: Any
    status_code: int = 200

    def to_response(self) -> Response:
        if self.status_code == 204:
            return Response(status_code=204)
        return JSONResponse(jsonable_encoder(self.body), status_code=self.status_code)


type MutationResponse = Fragment | ScriptRedirect | HttpRedirect | JsonBody


def render_fragment(
    template_name: str, selector: str, mode: PatchMode = PatchMode.REPLACE, **context: Any
) -> Fragment:
    return Fragment(selector=selector, html=render(template_name, **context), mode=mode)


async def negotiate(
    *,
    hypermedia: bool,
    source: PayloadSource | None,
    redirect_to: str,
    body: Any,
    status_code: int,
    navigate_to: str | None = None,
    fragment: Callable[[], Awaitable[Fragment]] | None = None,
) -> MutationResponse:
    """Pick the response for a create/update/delete.

    | hypermedia | source | response                                             |
    |------------|--------|------------------------------------------------------|
    | yes        | any    | ``fragment()`` if given, else ScriptRedirect         |
    | no         | form   | HttpRedirect(redirect_to)                            |
    | no         | json   | JsonBody(body, status_code)                          |

    ``navigate_to`` overrides the script target when it differs from where a
    form post should land (e.g. created entity's detail page vs. the list).
    ``fragment`` is only awaited when it will be used.
    """
    if hypermedia:
        if fragment is not None:
            return await fragment()
        return ScriptRedirect(navigate_to or redirect_to)
    if source is PayloadSource.FORM:
        return HttpRedirect(redirect_to)
    return JsonBody(body, status_code)


def kebab_to_camel(key: str) -> str:
    """``"_roaster-name"`` -> ``"_roasterName"``."""
    head, *rest = key.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def signals(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    return {kebab_to_camel(key): value for key, value in pairs}


def render_signals(pairs: Iterable[tuple[str, Any]]) -> Response:
    """Push values into the hypermedia client's reactive state without touching the DOM."""
    return JSONResponse(jsonable_encoder(signals(pairs)))
