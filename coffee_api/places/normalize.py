"""
Raw ``coffee_places`` record -> public ``Place``.

Records combine two independent sources: OpenStreetMap (address, contact,
amenities, a 0-10 completeness ``quality_score``) and Google Places (a 0-5
``google_rating``, review count, price level). Any column except ``id`` and
``name`` may be null; ``None``, NaN and blank strings all count as absent.

Optional attributes are sparse: they appear in the output only when the source
populated them. Which attributes exist, and how each is converted, lives in the
``OPTIONAL_FIELDS`` / ``ADDRESS_FIELDS`` tables below.
"""
from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

import numpy as np
import pandas as pd

from .hours import DEFAULT_CLOSE, DEFAULT_OPEN, format_time
from .models import Address, OpenHours, Place

UNKNOWN_CITY = "Unknown"
MAX_RATING = 5.0

_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "0"}


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, np.ndarray)):
        return len(value) == 0
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_str(value: Any) -> str | None:
    if _is_absent(value):
        return None
    return str(value).strip()


def _as_float(value: Any) -> float | None:
    if _is_absent(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _as_int(value: Any) -> int | None:
    result = _as_float(value)
    return int(result) if result is not None else None


def _as_bool(value: Any) -> bool | None:
    if _is_absent(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        return None
    number = _as_float(value)
    return bool(number) if number is not None else None


def _as_tags(value: Any) -> list[str]:
    if _is_absent(value):
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(tag).strip().lower() for tag in value if str(tag).strip()]


# (source column, Place attribute, converter)
OPTIONAL_FIELDS: tuple[tuple[str, str, Callable[[Any], Any]], ...] = (
    ("lat", "lat", _as_float),
    ("lon", "lon", _as_float),
    ("phone", "phone", _as_str),
    ("website", "website", _as_str),
    ("email", "email", _as_str),
    ("opening_hours", "opening_hours", _as_str),
    ("has_wifi", "has_wifi", _as_bool),
    ("has_outdoor_seating", "has_outdoor_seating", _as_bool),
    ("has_wheelchair_access", "has_wheelchair_access", _as_bool),
    ("has_takeaway", "has_takeaway", _as_bool),
    ("has_delivery", "has_delivery", _as_bool),
    ("quality_score", "quality_score", _as_float),
    ("is_verified", "is_verified", _as_bool),
    ("google_rating", "google_rating", _as_float),
    ("google_review_count", "google_review_count", _as_int),
    ("google_price_level", "google_price_level", _as_int),
)

# (source column, Address attribute). ``address_city`` alone does not make an address.
ADDRESS_FIELDS: tuple[tuple[str, str], ...] = (
    ("address_street", "street"),
    ("address_housenumber", "housenumber"),
    ("address_postcode", "postcode"),
    ("address_city", "city"),
    ("address_full", "full"),
)
_ADDRESS_TRIGGERS = ("address_street", "address_housenumber", "address_postcode", "address_full")


def effective_rating(google_rating: Any, quality_score: Any) -> float:
    """
    The 0-5 rating exposed as ``Place.rating``.

    Google rating wins when present; otherwise the 0-10 quality score is halved;
    otherwise 0. Clamped to [0, 5]. The store evaluates ``minRating`` with this
    same function.
    """
    rating = _as_float(google_rating)
    if rating is None:
        score = _as_float(quality_score)
        rating = score / 2 if score is not None else 0.0
    return min(MAX_RATING, max(0.0, rating))


def _address(record: Mapping[str, Any]) -> Address | None:
    if all(_is_absent(record.get(col)) for col in _ADDRESS_TRIGGERS):
        return None
    return Address(**{attr: _as_str(record.get(col)) for col, attr in ADDRESS_FIELDS})


def normalize_record(record: Mapping[str, Any]) -> Place:
    optional: dict[str, Any] = {}
    for column, attr, convert in OPTIONAL_FIELDS:
        value = convert(record.get(column))
        if value is not None:
            optional[attr] = value

    return Place(
        id=str(record.get("id")),
        name=_as_str(record.get("name")) or "",
        city=_as_str(record.get("address_city")) or UNKNOWN_CITY,
        rating=effective_rating(record.get("google_rating"), record.get("quality_score")),
        open_hours=OpenHours(
            start=format_time(record.get("opening_hours_start")) or DEFAULT_OPEN,
            end=format_time(record.get("opening_hours_end")) or DEFAULT_CLOSE,
        ),
        tags=_as_tags(record.get("tags")),
        address=_address(record),
        **optional,
    )
