from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from functools import singledispatch
from pathlib import Path
from typing import Any, NamedTuple

import numpy as np
import pandas as pd

from ..config import DEFAULT_SERVICE_CONFIG
from .errors import StorageError
from .filters import CityIn, HasAllTags, MinRating, OpensBy, OpenUntil, Predicate
from .hours import to_minutes
from .normalize import effective_rating

logger = logging.getLogger(__name__)

RAW_COLUMNS: list[str] = [
    "id",
    "name",
    "lat",
    "lon",
    "address_street",
    "address_housenumber",
    "address_postcode",
    "address_city",
    "address_full",
    "phone",
    "website",
    "email",
    "opening_hours",
    "opening_hours_start",
    "opening_hours_end",
    "has_wifi",
    "has_outdoor_seating",
    "has_wheelchair_access",
    "has_takeaway",
    "has_delivery",
    "tags",
    "quality_score",
    "is_verified",
    "google_rating",
    "google_review_count",
    "google_price_level",
]

# Read as text so that e.g. house numbers and postcodes keep their formatting
_TEXT_COLUMNS = {
    col: str
    for col in (
        "id",
        "name",
        "address_street",
        "address_housenumber",
        "address_postcode",
        "address_city",
        "address_full",
        "phone",
        "website",
        "email",
        "opening_hours",
        "opening_hours_start",
        "opening_hours_end",
        "tags",
    )
}


class SortKey(NamedTuple):
    column: str
    descending: bool = False


class PlaceStore(ABC):
    """
    Read-only access to raw ``coffee_places`` records.

    Predicates passed to every method are AND-combined. Rows come back as
    plain dicts keyed by ``RAW_COLUMNS``.
    """

    def __init__(self) -> None:
        # Distinguishes this store's entries in the query cache
        self.cache_token = uuid.uuid4().hex

    @abstractmethod
    def count(self, predicates: Sequence[Predicate]) -> int: ...

    @abstractmethod
    def fetch_page(
        self,
        predicates: Sequence[Predicate],
        order: Sequence[SortKey],
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]: ...

    @abstractmethod
    def fetch_random(self, predicates: Sequence[Predicate]) -> dict[str, Any] | None:
        """Return one matching row chosen uniformly at random, or ``None``."""

    @abstractmethod
    def city_counts(self) -> list[tuple[str, int]]:
        """Distinct non-empty cities with record counts, most places first."""


# ── Predicate rendering (pandas) ────────────────────────────────────────


@singledispatch
def render_predicate(predicate: Predicate, df: pd.DataFrame) -> pd.Series:
    raise TypeError(f"Unsupported predicate: {predicate!r}")


@render_predicate.register(CityIn)
def _(predicate: CityIn, df: pd.DataFrame) -> pd.Series:
    return df["_city_lower"].isin(predicate.names)


@render_predicate.register(MinRating)
def _(predicate: MinRating, df: pd.DataFrame) -> pd.Series:
    return df["_rating"] >= predicate.value


@render_predicate.register(OpensBy)
def _(predicate: OpensBy, df: pd.DataFrame) -> pd.Series:
    # NaN (unknown hours) never compares true
    return df["_opens"] <= predicate.minutes


@render_predicate.register(OpenUntil)
def _(predicate: OpenUntil, df: pd.DataFrame) -> pd.Series:
    return df["_closes"] >= predicate.minutes


@render_predicate.register(HasAllTags)
def _(predicate: HasAllTags, df: pd.DataFrame) -> pd.Series:
    return df["_tag_set"].apply(lambda tags: predicate.tags <= tags).astype(bool)


def render_mask(df: pd.DataFrame, predicates: Sequence[Predicate]) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    for predicate in predicates:
        mask = mask & render_predicate(predicate, df)
    return mask


# ── DataFrame-backed store ──────────────────────────────────────────────


def _parse_tags(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        items = value
    elif isinstance(value, str):
        items = value.split(",")
    else:
        return []
    return [str(t).strip().lower() for t in items if str(t).strip()]


def _prepare(raw: pd.DataFrame) -> pd.DataFrame:
    df = raw.copy()
    for col in RAW_COLUMNS:
        if col not in df.columns:
            df[col] = np.nan
    df = df[RAW_COLUMNS].reset_index(drop=True)
    df["id"] = df["id"].astype(str)

    # Derived lookup columns, prefixed with "_" and never returned
    df["tags"] = df["tags"].apply(_parse_tags)
    df["_tag_set"] = df["tags"].apply(frozenset)
    df["_city_lower"] = df["address_city"].fillna("").astype(str).str.strip().str.lower()
    df["_rating"] = [
        effective_rating(g, q) for g, q in zip(df["google_rating"], df["quality_score"])
    ]
    df["_opens"] = pd.to_numeric(df["opening_hours_start"].map(to_minutes), errors="coerce")
    df["_closes"] = pd.to_numeric(df["opening_hours_end"].map(to_minutes), errors="coerce")
    return df


class DataFrameStore(PlaceStore):
    """In-memory store over a snapshot of the ``coffee_places`` table."""

    def __init__(self, frame: pd.DataFrame, rng: np.random.Generator | None = None) -> None:
        super().__init__()
        self._df = _prepare(frame)
        self._rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_csv(cls, path: Path, rng: np.random.Generator | None = None) -> "DataFrameStore":
        try:
            frame = pd.read_csv(path, dtype=_TEXT_COLUMNS)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not load coffee places from {path}: {exc}") from exc
        logger.info("Loaded %d coffee places from %s", len(frame), path)
        return cls(frame, rng=rng)

    def __len__(self) -> int:
        return len(self._df)

    def _matching(self, predicates: Sequence[Predicate]) -> pd.DataFrame:
        return self._df.loc[render_mask(self._df, predicates)]

    @staticmethod
    def _records(frame: pd.DataFrame) -> list[dict[str, Any]]:
        return frame[RAW_COLUMNS].to_dict(orient="records")

    def count(self, predicates: Sequence[Predicate]) -> int:
        return int(render_mask(self._df, predicates).sum())

    def fetch_page(
        self,
        predicates: Sequence[Predicate],
        order: Sequence[SortKey],
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]:
        matched = self._matching(predicates)
        if order:
            matched = matched.sort_values(
                by=[key.column for key in order],
                ascending=[not key.descending for key in order],
                na_position="last",
                kind="mergesort",
            )
        return self._records(matched.iloc[offset : offset + limit])

    def fetch_random(self, predicates: Sequence[Predicate]) -> dict[str, Any] | None:
        matched = self._matching(predicates)
        if matched.empty:
            return None
        position = int(self._rng.integers(len(matched)))
        return self._records(matched.iloc[[position]])[0]

    def city_counts(self) -> list[tuple[str, int]]:
        cities = self._df["address_city"].dropna().astype(str).str.strip()
        counts = cities[cities != ""].value_counts()
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [(name, int(count)) for name, count in ordered]


_store: PlaceStore | None = None


def get_store() -> PlaceStore:
    """Return the process-wide store, loading it on first call."""
    global _store
    if _store is None:
        _store = DataFrameStore.from_csv(DEFAULT_SERVICE_CONFIG.data_path)
    return _store
