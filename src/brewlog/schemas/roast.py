"""Roast schemas."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, field_validator

from brewlog.listing import SortDirection
from brewlog.models import Roast
from brewlog.schemas.fields import blank_to_none


class RoastSortKey(StrEnum):
    CREATED_AT = "created-at"
    NAME = "name"
    ROASTER = "roaster"
    ORIGIN = "origin"

    @classmethod
    def default(cls) -> "RoastSortKey":
        return cls.CREATED_AT

    @classmethod
    def from_query(cls, value: str) -> "RoastSortKey | None":
        try:
            return cls(value)
        except ValueError:
            return None

    def query_value(self) -> str:
        return self.value

    def default_direction(self) -> SortDirection:
        if self is RoastSortKey.CREATED_AT:
            return SortDirection.DESC
        return SortDirection.ASC


class NewRoastSubmission(BaseModel):
    roaster_id: int
    name: str
    origin: str | None = None
    region: str | None = None
    producer: str | None = None
    process: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    normalize_optional = field_validator(
        "origin", "region", "producer", "process", mode="before"
    )(blank_to_none)


class RoastResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    roaster_id: int
    name: str
    slug: str
    origin: str | None
    region: str | None
    producer: str | None
    process: str | None
    created_at: datetime


@dataclass
class RoastView:
    id: int
    name: str
    roaster_name: str
    origin: str
    process: str
    created_date: str

    @classmethod
    def from_model(cls, roast: Roast) -> "RoastView":
        return cls(
            id=roast.id,
            name=roast.name,
            roaster_name=roast.roaster.name,
            origin=roast.origin or "",
            process=roast.process or "",
            created_date=roast.created_at.strftime("%Y-%m-%d"),
        )
