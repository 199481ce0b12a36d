from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import QueryValidationError
from .hours import TIME_PATTERN, format_time

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


class PlaceQuery(BaseModel):
    """Typed, immutable filter specification parsed from the query string."""

    # Query-string names only; snake_case field names are not accepted as input
    model_config = ConfigDict(frozen=True, extra="ignore")

    city: str | None = None
    min_rating: float | None = Field(
        default=None, alias="minRating", ge=0.0, le=5.0, allow_inf_nan=False
    )
    open_after: str | None = Field(default=None, alias="openAfter")
    open_before: str | None = Field(default=None, alias="openBefore")
    tags: tuple[str, ...] = ()
    random: bool = False
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("city", mode="before")
    @classmethod
    def _strip_city(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("open_after", "open_before", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> Any:
        if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
            raise ValueError("must be a time in HH:mm format between 00:00 and 23:59")
        return format_time(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            seen: dict[str, None] = {}
            for tag in value:
                token = str(tag).strip().lower()
                if token:
                    seen.setdefault(token, None)
            return tuple(seen)
        return value

    @field_validator("random", mode="before")
    @classmethod
    def _parse_random(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError('must be "true" or "false"')


def _field_name(loc: tuple[Any, ...]) -> str:
    return str(loc[0]) if loc else "query"


def parse_query(params: Mapping[str, str]) -> PlaceQuery:
    """
    Validate raw query-string values into a ``PlaceQuery``.

    Every offending parameter is reported, once, under its query-string name.
    Unknown parameters are ignored.
    """
    try:
        return PlaceQuery.model_validate(dict(params))
    except ValidationError as exc:
        details: list[dict[str, str]] = []
        reported: set[str] = set()
        for err in exc.errors(include_url=False):
            field = _field_name(err["loc"])
            if field in reported:
                continue
            reported.add(field)
            details.append({"field": field, "message": err["msg"]})
        raise QueryValidationError(details) from exc
