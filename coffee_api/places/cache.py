from __future__ import annotations

import hashlib
import json
import threading
import time
from collections.abc import Sequence
from typing import Any

from .filters import Predicate

_cache: dict[str, dict[str, Any]] = {}
MAX_ENTRIES = 1024
_lock = threading.Lock()
_hits: int = 0
_misses: int = 0


def make_key(namespace: str, predicates: Sequence[Predicate], page: int, limit: int) -> str:
    """Key on the compiled predicates, never on the raw query string."""
    normalized = json.dumps(
        {
            "store": namespace,
            "predicates": [p.cache_key() for p in predicates],
            "page": page,
            "limit": limit,
        },
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(key: str, ttl: float) -> Any | None:
    global _hits, _misses
    with _lock:
        entry = _cache.get(key)
        if entry and time.time() - entry["created_at"] < ttl:
            _hits += 1
            return entry["value"]
        if entry:
            del _cache[key]
        _misses += 1
        return None


def cache_set(key: str, value: Any, ttl: float, max_entries: int = MAX_ENTRIES) -> None:
    now = time.time()
    with _lock:
        expired = [k for k, entry in _cache.items() if now - entry["created_at"] >= ttl]
        for k in expired:
            del _cache[k]
        _cache.pop(key, None)
        # Dicts keep insertion order, so the first key is the oldest entry
        while len(_cache) >= max_entries:
            del _cache[next(iter(_cache))]
        _cache[key] = {"value": value, "created_at": now}


def get_cache_stats() -> dict:
    with _lock:
        total = _hits + _misses
        return {
            "size": len(_cache),
            "hits": _hits,
            "misses": _misses,
            "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
