from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..cities.aliases import city_aliases
from ..config import DEFAULT_SERVICE_CONFIG, ServiceConfig
from .cache import cache_get, cache_set, make_key
from .data_store import PlaceStore, SortKey
from .errors import PlaceNotFoundError
from .filters import Predicate, compile_filters
from .models import PageMeta, PlacesPage
from .normalize import normalize_record
from .validation import PlaceQuery

logger = logging.getLogger(__name__)

# Total order: most complete first, then alphabetical, id breaks name ties
DEFAULT_ORDER: tuple[SortKey, ...] = (
    SortKey("quality_score", descending=True),
    SortKey("name"),
    SortKey("id"),
)


def assemble_page(
    records: Sequence[dict[str, Any]], total: int, page: int, page_size: int
) -> PlacesPage:
    return PlacesPage(
        meta=PageMeta(total=total, page=page, page_size=page_size),
        data=[normalize_record(r) for r in records],
    )


def select_random(store: PlaceStore, predicates: Sequence[Predicate]) -> PlacesPage:
    record = store.fetch_random(predicates)
    if record is None:
        raise PlaceNotFoundError("random selection matched no records")
    return assemble_page([record], total=1, page=1, page_size=1)


def select_page(
    store: PlaceStore,
    predicates: Sequence[Predicate],
    page: int,
    limit: int,
    config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> PlacesPage:
    key = make_key(store.cache_token, predicates, page, limit)
    if config.cache_enabled:
        cached = cache_get(key, config.cache_ttl)
        if cached is not None:
            return cached

    # Count and page use the same predicates; the dataset only changes between
    # batch syncs, so the two reads are not wrapped in a transaction.
    total = store.count(predicates)
    offset = (page - 1) * limit
    records = store.fetch_page(predicates, DEFAULT_ORDER, limit, offset) if offset < total else []

    response = assemble_page(records, total=total, page=page, page_size=limit)
    # Pages past the end are cheap to recompute and would only crowd the cache
    if config.cache_enabled and offset < total:
        cache_set(key, response, config.cache_ttl)
    return response


def run_query(
    query: PlaceQuery,
    store: PlaceStore,
    aliases: Callable[[str], list[str]] = city_aliases,
    config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> PlacesPage:
    predicates = compile_filters(query, aliases)
    logger.debug("Compiled predicates: %s (random=%s)", predicates, query.random)

    if query.random:
        return select_random(store, predicates)

    response = select_page(store, predicates, query.page, query.limit, config)
    logger.debug(
        "Page %d/%d-per-page: %d of %d matches",
        query.page, query.limit, len(response.data), response.meta.total,
    )
    return response
