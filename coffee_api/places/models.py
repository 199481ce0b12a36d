from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OpenHours(_CamelModel):
    start: str
    end: str


class Address(_CamelModel):
    street: str | None = None
    housenumber: str | None = None
    postcode: str | None = None
    city: str | None = None
    full: str | None = None


class Place(_CamelModel):
    id: str
    name: str
    city: str
    rating: float = Field(..., ge=0.0, le=5.0)
    open_hours: OpenHours
    tags: list[str] = Field(default_factory=list)

    # Optional enrichment, omitted from payloads when unset
    lat: float | None = None
    lon: float | None = None
    phone: str | None = None
    website: str | None = None
    email: str | None = None
    address: Address | None = None
    opening_hours: str | None = None
    has_wifi: bool | None = None
    has_outdoor_seating: bool | None = None
    has_wheelchair_access: bool | None = None
    has_takeaway: bool | None = None
    has_delivery: bool | None = None
    quality_score: float | None = None
    is_verified: bool | None = None
    google_rating: float | None = None
    google_review_count: int | None = None
    google_price_level: int | None = None


class PageMeta(_CamelModel):
    total: int
    page: int
    page_size: int


class PlacesPage(_CamelModel):
    meta: PageMeta
    data: list[Place]


class CityOut(_CamelModel):
    name: str
    display_name: str
    count: int


class CitiesResponse(_CamelModel):
    total: int
    cities: list[CityOut]
