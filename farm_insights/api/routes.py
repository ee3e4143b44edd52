"""
FastAPI routes for the farm analysis service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from farm_insights.dependencies import get_analysis_service
from farm_insights.schemas import (
    AdvancedAnalyzeRequest,
    AnalysisOptions,
    AnalyzeRequest,
    BatchAnalyzeRequest,
)
from farm_insights.services import AnalysisError

router = APIRouter()
logger = logging.getLogger(__name__)


ADVANCED_REQUIREMENTS: Dict[str, Any] = {
    "depth": "comprehensive",
    "priority_level": "critical",
    "include_recommendations": True,
    "risk_assessment": True,
    "forecast": True,
    "context": "This is a critical analysis for quarterly review",
}

ADVANCED_OPTIONS = AnalysisOptions(
    model="anthropic/claude-3-opus",
    temperature=0.3,
    max_tokens=6000,
    cache=True,
)


def _error_response(exc: AnalysisError) -> JSONResponse:
    """Render a service failure with its code as the HTTP status."""
    code = exc.code
    if code < 400 or code > 599:
        code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    return JSONResponse(
        status_code=code,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/farm-analysis/analyze", status_code=HTTPStatus.OK)
async def analyze_farm_data(
    payload: AnalyzeRequest,
    service: Annotated[Any, Depends(get_analysis_service)],
) -> Any:
    """Analyze one dataset, answering from the cache when possible."""
    use_cache = payload.options is None or payload.options.cache
    try:
        if use_cache:
            cached = service.get_cached_analysis(
                payload.data, payload.analysis_type, payload.requirements
            )
            if cached is not None:
                return {
                    "success": True,
                    "from_cache": True,
                    "data": cached.model_dump(mode="json"),
                }

        result = await service.analyze(
            payload.data,
            payload.analysis_type,
            payload.requirements,
            payload.options,
        )
    except AnalysisError as exc:
        return _error_response(exc)

    return {
        "success": True,
        "from_cache": False,
        "data": result.model_dump(mode="json"),
    }


@router.post("/farm-analysis/batch", status_code=HTTPStatus.OK)
async def batch_analyze_farm_data(
    payload: BatchAnalyzeRequest,
    service: Annotated[Any, Depends(get_analysis_service)],
) -> Any:
    """Analyze several datasets; per-dataset failures are reported inline."""
    outcomes = await service.batch_analyze(
        payload.datasets,
        payload.analysis_type,
        payload.requirements,
        payload.options,
    )
    logger.info(
        "Batch analysis finished",
        extra={
            "datasets": len(outcomes),
            "failed": sum(1 for item in outcomes.values() if getattr(item, "error", False)),
        },
    )
    return {
        "success": True,
        "data": {key: item.model_dump(mode="json") for key, item in outcomes.items()},
    }


@router.post("/farm-analysis/advanced", status_code=HTTPStatus.OK)
async def advanced_farm_analysis(
    payload: AdvancedAnalyzeRequest,
    service: Annotated[Any, Depends(get_analysis_service)],
) -> Any:
    """Run a comprehensive, critical-priority analysis with a stronger model."""
    try:
        result = await service.analyze(
            payload.data,
            payload.type,
            ADVANCED_REQUIREMENTS,
            ADVANCED_OPTIONS,
        )
    except AnalysisError as exc:
        return _error_response(exc)

    return {"success": True, "data": result.model_dump(mode="json")}


__all__ = ["ADVANCED_OPTIONS", "ADVANCED_REQUIREMENTS", "router"]
