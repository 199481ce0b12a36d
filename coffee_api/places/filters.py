"""
Compile a ``PlaceQuery`` into conjunctive, storage-agnostic predicates.

Each predicate constrains one attribute; a record matches a query when it
satisfies every predicate. Stores render predicates into their own query
language (see ``data_store.render_predicate``).
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
from typing import Any

from ..cities.aliases import city_aliases
from .hours import to_minutes
from .validation import PlaceQuery


@dataclass(frozen=True)
class Predicate:
    def cache_key(self) -> list[Any]:
        key: list[Any] = [type(self).__name__]
        for f in fields(self):
            value = getattr(self, f.name)
            key.append(sorted(value) if isinstance(value, frozenset) else value)
        return key


@dataclass(frozen=True)
class CityIn(Predicate):
    """Lower-cased stored city is one of ``names``."""

    names: frozenset[str]


@dataclass(frozen=True)
class MinRating(Predicate):
    """Effective rating (Google rating, else quality score / 2, else 0) >= ``value``."""

    value: float


@dataclass(frozen=True)
class OpensBy(Predicate):
    """Opening time, as minute of day, is at or before ``minutes``."""

    minutes: int


@dataclass(frozen=True)
class OpenUntil(Predicate):
    """Closing time, as minute of day, is at or after ``minutes``."""

    minutes: int


@dataclass(frozen=True)
class HasAllTags(Predicate):
    tags: frozenset[str]


def compile_filters(
    query: PlaceQuery,
    aliases: Callable[[str], list[str]] = city_aliases,
) -> tuple[Predicate, ...]:
    predicates: list[Predicate] = []

    if query.city:
        names = {query.city.lower()}
        names.update(alias.lower() for alias in aliases(query.city))
        predicates.append(CityIn(frozenset(names)))

    if query.min_rating is not None:
        predicates.append(MinRating(query.min_rating))

    if query.open_after:
        predicates.append(OpensBy(to_minutes(query.open_after)))

    if query.open_before:
        predicates.append(OpenUntil(to_minutes(query.open_before)))

    if query.tags:
        predicates.append(HasAllTags(frozenset(query.tags)))

    return tuple(predicates)
