"""Expose constructed client wrappers."""

from .cache_store import CacheStore, InMemoryCacheStore, SQLiteCacheStore
from .openrouter import OpenRouterClient, UpstreamError

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "OpenRouterClient",
    "SQLiteCacheStore",
    "UpstreamError",
]
