"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from farm_insights.clients import (
    CacheStore,
    InMemoryCacheStore,
    OpenRouterClient,
    SQLiteCacheStore,
)
from farm_insights.core.config import get_settings
from farm_insights.services import AnalysisCache, AnalysisService
from farm_insights.utils.http import RetryConfig


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_openrouter_client() -> OpenRouterClient:
    """Provide the completion API client."""
    settings = _settings()
    return OpenRouterClient(
        settings.openrouter,
        app_name=settings.app_name,
        app_url=settings.app_url,
    )


@lru_cache()
def get_cache_store() -> CacheStore:
    """Provide the configured cache backend, shared across requests."""
    settings = _settings().openrouter
    if settings.cache_backend == "sqlite":
        return SQLiteCacheStore(settings.cache_db_path)
    return InMemoryCacheStore()


@lru_cache()
def get_analysis_cache() -> AnalysisCache:
    """Provide the analysis result cache."""
    settings = _settings().openrouter
    return AnalysisCache(get_cache_store(), ttl_seconds=settings.cache_ttl)


def get_analysis_service() -> AnalysisService:
    """Build an analysis service over the shared client and cache."""
    settings = _settings().openrouter
    retry_config = None
    if settings.retry_enabled:
        retry_config = RetryConfig.from_milliseconds(
            attempts=settings.retry_max_attempts,
            delay_ms=settings.retry_delay,
        )
    return AnalysisService(
        get_openrouter_client(),
        get_analysis_cache(),
        default_model=settings.default_model,
        cache_enabled=settings.cache_enabled,
        retry_config=retry_config,
    )


__all__ = [
    "get_analysis_cache",
    "get_analysis_service",
    "get_cache_store",
    "get_openrouter_client",
]
