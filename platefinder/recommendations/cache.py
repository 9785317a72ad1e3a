from __future__ import annotations

import hashlib
import json
import time
from typing import Any

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
_DEFAULT_TTL = 300  # 5 minutes
_MAX_ENTRIES = 256


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def is_cacheable(request_dict: dict) -> bool:
    """Unseeded greedy searches are random per call and never cached."""
    return not (request_dict.get("algorithm") == "greedy" and request_dict.get("seed") is None)


def cache_get(request_dict: dict) -> Any | None:
    global _hits, _misses
    key = _make_key(request_dict)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < _DEFAULT_TTL:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(request_dict: dict, value: Any) -> None:
    if len(_cache) >= _MAX_ENTRIES:
        oldest = min(_cache, key=lambda k: _cache[k]["created_at"])
        del _cache[oldest]
    _cache[_make_key(request_dict)] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "max_entries": _MAX_ENTRIES,
        "ttl_seconds": _DEFAULT_TTL,
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
