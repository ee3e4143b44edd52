"""
FastAPI application entrypoint for the farm analysis service.
"""

from __future__ import annotations

from fastapi import FastAPI

from farm_insights.api.routes import router as api_router
from farm_insights.core.config import get_settings
from farm_insights.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Farm Insights",
        version="0.1.0",
        description="REST API for model-backed analysis of farm operations data.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
