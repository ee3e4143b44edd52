"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_analysis_cache,
    get_analysis_service,
    get_cache_store,
    get_openrouter_client,
)

__all__ = [
    "get_analysis_cache",
    "get_analysis_service",
    "get_cache_store",
    "get_openrouter_client",
]
