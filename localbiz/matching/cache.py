from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from ..providers.models import Provider

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
_DEFAULT_TTL = 300  # 5 minutes


def provider_fingerprint(providers: list[Provider]) -> str:
    """Changes whenever the candidate set or any candidate's data changes."""
    payload = json.dumps([p.model_dump() for p in providers], sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


def _make_key(category: str, answers: dict[str, str], fingerprint: str) -> str:
    normalized = json.dumps(
        {"category": category, "answers": answers, "providers": fingerprint},
        sort_keys=True,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(category: str, answers: dict[str, str], fingerprint: str) -> Any | None:
    global _hits, _misses
    key = _make_key(category, answers, fingerprint)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < _DEFAULT_TTL:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(category: str, answers: dict[str, str], fingerprint: str, value: Any) -> None:
    key = _make_key(category, answers, fingerprint)
    _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
