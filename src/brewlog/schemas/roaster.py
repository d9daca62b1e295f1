"""Roaster schemas.

RoasterSortKey          -- closed set of sortable columns for roaster lists.
NewRoasterSubmission    -- create body (JSON or form-encoded, same shape).
UpdateRoasterSubmission -- partial update body.
RoasterResponse         -- JSON representation.
RoasterView             -- what list/detail templates render.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, field_validator

from brewlog.listing import SortDirection
from brewlog.models import Roaster
from brewlog.schemas.fields import blank_to_none


class RoasterSortKey(StrEnum):
    CREATED_AT = "created-at"
    NAME = "name"
    COUNTRY = "country"
    CITY = "city"

    @classmethod
    def default(cls) -> "RoasterSortKey":
        return cls.CREATED_AT

    @classmethod
    def from_query(cls, value: str) -> "RoasterSortKey | None":
        try:
            return cls(value)
        except ValueError:
            return None

    def query_value(self) -> str:
        return self.value

    def default_direction(self) -> SortDirection:
        if self is RoasterSortKey.CREATED_AT:
            return SortDirection.DESC
        return SortDirection.ASC


class NewRoasterSubmission(BaseModel):
    name: str
    country: str
    city: str | None = None
    homepage: str | None = None

    @field_validator("name", "country")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    normalize_optional = field_validator("city", "homepage", mode="before")(blank_to_none)


class UpdateRoasterSubmission(BaseModel):
    name: str | None = None
    country: str | None = None
    city: str | None = None
    homepage: str | None = None

    normalize_optional = field_validator("name", "country", "city", "homepage", mode="before")(
        blank_to_none
    )

    def changes(self) -> dict[str, str]:
        """Only the fields the client actually supplied with a value."""
        return self.model_dump(exclude_none=True)


class RoasterResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    slug: str
    country: str
    city: str | None
    homepage: str | None
    created_at: datetime


@dataclass
class RoasterView:
    id: int
    name: str
    slug: str
    country: str
    city: str
    homepage: str | None
    detail_url: str
    created_date: str

    @classmethod
    def from_model(cls, roaster: Roaster) -> "RoasterView":
        return cls(
            id=roaster.id,
            name=roaster.name,
            slug=roaster.slug,
            country=roaster.country,
            city=roaster.city or "",
            homepage=roaster.homepage,
            detail_url=f"/roasters/{roaster.id}",
            created_date=roaster.created_at.strftime("%Y-%m-%d"),
        )
