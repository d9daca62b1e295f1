"""Mutation request bodies that may arrive as JSON or as a form post.

Typed API clients send ``application/json``; plain HTML forms send
``application/x-www-form-urlencoded`` (or, from some clients, no content type
at all). Both decode into the same Pydantic submission model, and the
``PayloadSource`` tag records which one it was so the handler can pick the
matching response shape (see ``responses.negotiate``).
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import parse_qsl

import pydantic
from fastapi import Request

from brewlog.exceptions import ValidationError
from brewlog.logging import get_logger

logger = get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"


class PayloadSource(StrEnum):
    JSON = "json"
    FORM = "form"


@dataclass(frozen=True)
class FlexiblePayload[T: pydantic.BaseModel]:
    inner: T
    source: PayloadSource

    def into_parts(self) -> tuple[T, PayloadSource]:
        return self.inner, self.source


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def decode_payload[T: pydantic.BaseModel](
    content_type: str, body: bytes, model: type[T]
) -> FlexiblePayload[T]:
    """Decode ``body`` according to ``content_type``.

    Raises:
        ValidationError: "unsupported content type" for anything but JSON or
            form encoding; "invalid JSON payload" / "invalid form payload" when
            the body does not decode or validate under its declared type.
    """
    media_type = _media_type(content_type)

    if media_type == JSON_MEDIA_TYPE:
        try:
            inner = model.model_validate_json(body)
        except pydantic.ValidationError as exc:
            logger.info("payload_rejected", source="json", errors=exc.errors(include_url=False))
            raise ValidationError("invalid JSON payload") from exc
        return FlexiblePayload(inner, PayloadSource.JSON)

    if media_type in ("", FORM_MEDIA_TYPE):
        try:
            fields = dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))
            inner = model.model_validate(fields)
        except UnicodeDecodeError as exc:
            logger.info("payload_rejected", source="form", error=str(exc))
            raise ValidationError("invalid form payload") from exc
        except pydantic.ValidationError as exc:
            logger.info("payload_rejected", source="form", errors=exc.errors(include_url=False))
            raise ValidationError("invalid form payload") from exc
        return FlexiblePayload(inner, PayloadSource.FORM)

    raise ValidationError("unsupported content type")


def flexible_payload[T: pydantic.BaseModel](
    model: type[T],
) -> Callable[[Request], Awaitable[FlexiblePayload[T]]]:
    """Build a FastAPI dependency that decodes the request body into ``model``.

    Usage:
        payload: Annotated[
            FlexiblePayload[NewRoasterSubmission],
            Depends(flexible_payload(NewRoasterSubmission)),
        ]
    """

    async def dependency(request: Request) -> FlexiblePayload[T]:
        body = await request.body()
        return decode_payload(request.headers.get("content-type", ""), body, model)

    return dependency
