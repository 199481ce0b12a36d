from __future__ import annotations

from unittest.mock import patch

from coffee_api.config import ServiceConfig
from coffee_api.places.cache import cache_get, cache_set, clear_cache, get_cache_stats, make_key
from coffee_api.places.filters import CityIn, HasAllTags, MinRating
from coffee_api.places.query import run_query
from coffee_api.places.validation import parse_query


def test_cache_miss_then_hit():
    key = make_key("store", (MinRating(4.0),), 1, 10)
    assert cache_get(key, ttl=60) is None
    cache_set(key, "page", ttl=60)
    assert cache_get(key, ttl=60) == "page"
    stats = get_cache_stats()
    assert stats == {"size": 1, "hits": 1, "misses": 1, "hit_rate": 50.0}


def test_key_depends_on_compiled_predicates_not_spelling():
    a = make_key("store", (HasAllTags(frozenset({"wifi", "outdoor"})),), 1, 10)
    b = make_key("store", (HasAllTags(frozenset({"outdoor", "wifi"})),), 1, 10)
    assert a == b


def test_key_separates_pages_stores_and_filters():
    base = make_key("store", (CityIn(frozenset({"utrecht"})),), 1, 10)
    assert base != make_key("store", (CityIn(frozenset({"utrecht"})),), 2, 10)
    assert base != make_key("store", (CityIn(frozenset({"utrecht"})),), 1, 20)
    assert base != make_key("other", (CityIn(frozenset({"utrecht"})),), 1, 10)
    assert base != make_key("store", (CityIn(frozenset({"leiden"})),), 1, 10)


def test_entries_expire():
    key = make_key("store", (), 1, 10)
    with patch("coffee_api.places.cache.time.time", return_value=1000.0):
        cache_set(key, "page", ttl=60)
    with patch("coffee_api.places.cache.time.time", return_value=1061.0):
        assert cache_get(key, ttl=60) is None
    assert get_cache_stats()["size"] == 0


def test_clear_cache_resets_stats():
    key = make_key("store", (), 1, 10)
    cache_set(key, "page", ttl=60)
    cache_get(key, ttl=60)
    clear_cache()
    assert get_cache_stats() == {"size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}


def test_size_is_capped_with_oldest_evicted_first():
    keys = [make_key("store", (), page, 10) for page in range(1, 8)]
    for key in keys:
        cache_set(key, key, ttl=60, max_entries=5)
    assert get_cache_stats()["size"] == 5
    assert cache_get(keys[0], ttl=60) is None
    assert cache_get(keys[1], ttl=60) is None
    assert cache_get(keys[-1], ttl=60) == keys[-1]


def test_expired_entries_are_swept_on_write():
    with patch("coffee_api.places.cache.time.time", return_value=1000.0):
        for page in range(1, 50):
            cache_set(make_key("store", (), page, 10), "page", ttl=60)
    assert get_cache_stats()["size"] == 49
    with patch("coffee_api.places.cache.time.time", return_value=1100.0):
        cache_set(make_key("store", (), 50, 10), "page", ttl=60)
    assert get_cache_stats()["size"] == 1


def test_growing_page_numbers_do_not_grow_the_cache(store):
    config = ServiceConfig(cache_ttl=300)
    for page in range(1, 2001):
        run_query(parse_query({"page": str(page), "limit": "2"}), store, config=config)
    # 7 matches at 2 per page: only pages 1-4 hold data and get cached
    assert get_cache_stats()["size"] == 4
