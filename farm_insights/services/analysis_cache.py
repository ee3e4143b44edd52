"""Deterministic cache keys and the read/write contract for analysis results.

Keys are SHA256 digests of canonical JSON (sorted keys, compact separators) so
structurally equal requests map to the same entry whatever the key order of
the caller's mappings. Requirements are normalized before hashing, which makes
an omitted field and its explicit default equivalent.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from farm_insights.clients.cache_store import CacheStore
from farm_insights.schemas import AnalysisResult, AnalysisType, Requirements
from farm_insights.services.requirements import normalize_requirements

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "ai_analysis:"


def canonical_json(value: Any) -> str:
    """Serialize ``value`` with a stable key order and no whitespace."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def _digest(value: Any) -> str:
    return hashlib.sha256(canonical_json(value).encode("utf-8")).hexdigest()


def compute_cache_key(
    data: Mapping[str, Any],
    analysis_type: AnalysisType | str,
    requirements: Mapping[str, Any] | Requirements | None = None,
) -> str:
    """Derive the cache key for an analysis request."""
    normalized = normalize_requirements(requirements)
    payload = {
        "type": getattr(analysis_type, "value", analysis_type),
        "data_hash": _digest(data),
        "requirements_hash": _digest(
            normalized.model_dump(mode="json", by_alias=True)
        ),
    }
    return CACHE_KEY_PREFIX + _digest(payload)


class AnalysisCache:
    """Store and retrieve :class:`AnalysisResult` objects by derived key."""

    def __init__(self, store: CacheStore, *, ttl_seconds: int = 3600) -> None:
        self._store = store
        self._ttl = ttl_seconds

    def key_for(
        self,
        data: Mapping[str, Any],
        analysis_type: AnalysisType | str,
        requirements: Mapping[str, Any] | Requirements | None = None,
    ) -> str:
        return compute_cache_key(data, analysis_type, requirements)

    def get(self, key: str) -> Optional[AnalysisResult]:
        """Return the cached result, or ``None`` on a miss or expired entry."""
        payload = self._store.get(key)
        if payload is None:
            return None
        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError:
            logger.warning("Discarding unreadable cache entry", extra={"cache_key": key})
            return None

    def put(
        self, key: str, result: AnalysisResult, ttl_seconds: Optional[int] = None
    ) -> None:
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        self._store.put(key, result.model_dump(mode="json"), ttl)

    def lookup(
        self,
        data: Mapping[str, Any],
        analysis_type: AnalysisType | str,
        requirements: Mapping[str, Any] | Requirements | None = None,
    ) -> Optional[AnalysisResult]:
        """Compute the key for a request and read it in one step."""
        return self.get(self.key_for(data, analysis_type, requirements))


__all__ = [
    "AnalysisCache",
    "CACHE_KEY_PREFIX",
    "canonical_json",
    "compute_cache_key",
]
