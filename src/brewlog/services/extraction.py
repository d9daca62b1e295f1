"""AI-assisted roaster extraction.

Turns a free-text description and/or a product photo into roaster fields by
asking a chat-completions model (OpenRouter) for a JSON object. The
``RoasterExtractor`` protocol is the seam routers depend on, so tests swap in
a canned extractor via ``app.dependency_overrides[get_extractor]``.
"""

import json
from typing import Any, Protocol

import httpx
import pydantic
from pydantic import BaseModel, field_validator

from brewlog.config import settings
from brewlog.exceptions import UnexpectedError, ValidationError
from brewlog.logging import get_logger
from brewlog.schemas.fields import blank_to_none
from brewlog.services.usage import TokenUsage

logger = get_logger(__name__)

ROASTER_PROMPT = (
    "You extract coffee roaster details. Reply with a single JSON object with the "
    'keys "name", "country", "city" and "homepage". Use null for anything you '
    "cannot determine. Do not add any other text."
)


class ExtractionInput(BaseModel):
    prompt: str | None = None
    image: str | None = None  # data URL or https URL

    normalize = field_validator("prompt", "image", mode="before")(blank_to_none)

    def is_empty(self) -> bool:
        return self.prompt is None and self.image is None


class ExtractedRoaster(BaseModel):
    name: str | None = None
    country: str | None = None
    city: str | None = None
    homepage: str | None = None

    normalize = field_validator("name", "country", "city", "homepage", mode="before")(
        blank_to_none
    )

    def signal_pairs(self) -> list[tuple[str, Any]]:
        """Form field values keyed the way the create form names its signals."""
        return [
            ("_roaster-name", self.name or ""),
            ("_roaster-country", self.country or ""),
            ("_roaster-city", self.city or ""),
            ("_roaster-homepage", self.homepage or ""),
            ("_extracted", True),
        ]


class RoasterExtractor(Protocol):
    model: str

    async def extract_roaster(
        self, data: ExtractionInput
    ) -> tuple[ExtractedRoaster, TokenUsage]: ...


def extract_json_object(content: str) -> str:
    """The outermost ``{...}`` in ``content``; models often wrap JSON in prose or fences."""
    start, end = content.find("{"), content.rfind("}")
    if start == -1 or end < start:
        raise UnexpectedError("extraction response contained no JSON object")
    return content[start : end + 1]


def _usage_from(body: dict[str, Any]) -> TokenUsage:
    usage = body.get("usage") or {}
    return TokenUsage(
        prompt_tokens=int(usage.get("prompt_tokens", 0)),
        completion_tokens=int(usage.get("completion_tokens", 0)),
        total_tokens=int(usage.get("total_tokens", 0)),
        cost=float(usage.get("cost", 0.0)),
    )


class OpenRouterExtractor:
    def __init__(
        self,
        url: str,
        api_key: str,
        model: str,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def extract_roaster(self, data: ExtractionInput) -> tuple[ExtractedRoaster, TokenUsage]:
        if data.is_empty():
            raise ValidationError("provide a prompt or an image")

        content, usage = await self._complete(ROASTER_PROMPT, data)
        try:
            roaster = ExtractedRoaster.model_validate_json(extract_json_object(content))
        except pydantic.ValidationError as exc:
            logger.warning("extraction_unparseable", model=self.model, content=content[:500])
            raise UnexpectedError("extraction response did not match the roaster shape") from exc
        return roaster, usage

    def _messages(self, system_prompt: str, data: ExtractionInput) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        if data.prompt is not None:
            parts.append({"type": "text", "text": data.prompt})
        if data.image is not None:
            parts.append({"type": "image_url", "image_url": {"url": data.image}})
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": parts},
        ]

    async def _complete(self, system_prompt: str, data: ExtractionInput) -> tuple[str, TokenUsage]:
        payload = {
            "model": self.model,
            "messages": self._messages(system_prompt, data),
            "response_format": {"type": "json_object"},
            "usage": {"include": True},
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.url, json=payload, headers=headers)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error("extraction_request_failed", model=self.model, error=str(exc))
                raise UnexpectedError(f"extraction request failed: {exc}") from exc

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            raise UnexpectedError("extraction response was malformed") from exc
        if not isinstance(content, str):
            raise UnexpectedError("extraction response had no content")

        usage = _usage_from(body)
        logger.info(
            "extraction_completed",
            model=self.model,
            total_tokens=usage.total_tokens,
            cost=usage.cost,
        )
        return content, usage


def get_extractor() -> RoasterExtractor:
    return OpenRouterExtractor(
        url=settings.openrouter_url,
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        timeout=settings.openrouter_timeout,
    )
