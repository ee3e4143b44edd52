"""Service that turns farm operations data into a model-written analysis."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from pydantic import ValidationError

from farm_insights.clients.openrouter import UpstreamError
from farm_insights.schemas import (
    AnalysisOptions,
    AnalysisResult,
    AnalysisType,
    BatchItemError,
    Requirements,
    TokenUsage,
)
from farm_insights.services.analysis_cache import AnalysisCache
from farm_insights.services.insights import extract_insights
from farm_insights.services.prompts import build_system_prompt, build_user_prompt
from farm_insights.services.requirements import normalize_requirements
from farm_insights.utils.http import RetryConfig, call_with_retry

logger = logging.getLogger(__name__)

MAX_DATA_BYTES = 500_000
_RETRYABLE_STATUSES = frozenset({HTTPStatus.TOO_MANY_REQUESTS.value})

BatchOutcome = Union[AnalysisResult, BatchItemError]
OptionsInput = Union[AnalysisOptions, Mapping[str, Any], None]
RequirementsInput = Union[Requirements, Mapping[str, Any], None]


class CompletionClient(Protocol):
    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        options: Optional[AnalysisOptions] = None,
    ) -> Dict[str, Any]:
        ...


class AnalysisValidationError(ValueError):
    """Raised for requests rejected before any call to the completion API."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value


class AnalysisError(RuntimeError):
    """Uniform failure surfaced to callers of :class:`AnalysisService`."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or HTTPStatus.INTERNAL_SERVER_ERROR.value


def _is_retryable(exc: Exception) -> bool:
    if not isinstance(exc, UpstreamError):
        return False
    return exc.status_code in _RETRYABLE_STATUSES or exc.status_code >= 500


def _parse_options(options: OptionsInput) -> AnalysisOptions:
    if options is None:
        return AnalysisOptions()
    if isinstance(options, AnalysisOptions):
        return options
    return AnalysisOptions.model_validate(dict(options))


def validate_analysis_request(
    data: Mapping[str, Any], analysis_type: AnalysisType | str
) -> AnalysisType:
    """Check the dataset and analysis type; return the resolved type."""
    if not data:
        raise AnalysisValidationError("Data cannot be empty")

    try:
        resolved = AnalysisType(analysis_type)
    except ValueError as exc:
        raise AnalysisValidationError(
            f"Invalid analysis type: {getattr(analysis_type, 'value', analysis_type)}"
        ) from exc

    try:
        serialized = json.dumps(data)
    except (TypeError, ValueError) as exc:
        raise AnalysisValidationError(f"Data is not JSON serializable: {exc}") from exc
    if len(serialized.encode("utf-8")) > MAX_DATA_BYTES:
        raise AnalysisValidationError("Data size exceeds maximum allowed size")

    return resolved


def build_analysis_result(
    response: Mapping[str, Any], analysis_type: AnalysisType
) -> AnalysisResult:
    """Map a decoded completion body onto an :class:`AnalysisResult`."""
    choices = response.get("choices") or []
    first = choices[0] if choices and isinstance(choices[0], dict) else {}
    message = first.get("message") or {}
    content = message.get("content") or ""

    usage = response.get("usage") or {}
    return AnalysisResult(
        analysis_type=analysis_type.value,
        content=content,
        model_used=response.get("model") or "unknown",
        tokens_used=TokenUsage(
            prompt=usage.get("prompt_tokens") or 0,
            completion=usage.get("completion_tokens") or 0,
            total=usage.get("total_tokens") or 0,
        ),
        timestamp=datetime.now(timezone.utc).isoformat(),
        parsed_insights=extract_insights(content),
    )


class AnalysisService:
    """Validate, prompt, call the model, parse and cache one analysis at a time."""

    def __init__(
        self,
        completion_client: CompletionClient,
        cache: AnalysisCache,
        *,
        default_model: str,
        cache_enabled: bool = True,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self._client = completion_client
        self._cache = cache
        self._default_model = default_model
        self._cache_enabled = cache_enabled
        self._retry_config = retry_config

    async def analyze(
        self,
        data: Mapping[str, Any],
        analysis_type: AnalysisType | str,
        requirements: RequirementsInput = None,
        options: OptionsInput = None,
    ) -> AnalysisResult:
        """Run one analysis.

        Identical requests are answered from the cache while their entry is
        live, unless caching is disabled globally or through ``options.cache``.

        Raises:
            AnalysisError: wrapping validation failures, upstream failures and
                any other error raised along the way.
        """
        type_label = getattr(analysis_type, "value", analysis_type)
        try:
            resolved = validate_analysis_request(data, analysis_type)
            normalized = normalize_requirements(requirements)
            try:
                opts = _parse_options(options)
            except ValidationError as exc:
                raise AnalysisValidationError(f"Invalid options: {exc}") from exc

            use_cache = self._cache_enabled and opts.cache
            cache_key = self._cache.key_for(data, resolved, normalized)
            if use_cache:
                cached = self._cache.get(cache_key)
                if cached is not None:
                    logger.info(
                        "AI analysis served from cache",
                        extra={"type": type_label, "cache_key": cache_key},
                    )
                    return cached

            system_prompt = build_system_prompt(resolved)
            user_prompt = build_user_prompt(data, resolved, normalized)
            response = await self._complete(system_prompt, user_prompt, opts)
            result = build_analysis_result(response, resolved)

            if use_cache:
                self._cache.put(cache_key, result)

            logger.info(
                "AI analysis completed",
                extra={
                    "type": type_label,
                    "data_points": len(data),
                    "model": opts.model or self._default_model,
                },
            )
            return result
        except Exception as exc:
            logger.error(
                "AI analysis failed",
                extra={"type": type_label, "error": str(exc)},
            )
            code = getattr(exc, "status_code", None)
            raise AnalysisError(f"Analysis failed: {exc}", code=code) from exc

    async def batch_analyze(
        self,
        datasets: Mapping[str, Mapping[str, Any]],
        analysis_type: AnalysisType | str,
        requirements: RequirementsInput = None,
        options: OptionsInput = None,
    ) -> Dict[str, BatchOutcome]:
        """Analyze each dataset in turn; a failure only affects its own key."""
        results: Dict[str, BatchOutcome] = {}
        for key, data in datasets.items():
            try:
                results[key] = await self.analyze(
                    data, analysis_type, requirements, options
                )
            except AnalysisError as exc:
                results[key] = BatchItemError(message=str(exc))
        return results

    def get_cached_analysis(
        self,
        data: Mapping[str, Any],
        analysis_type: AnalysisType | str,
        requirements: RequirementsInput = None,
    ) -> Optional[AnalysisResult]:
        """Return a live cached result for the request, if any."""
        if not self._cache_enabled:
            return None
        return self._cache.lookup(data, analysis_type, requirements)

    async def _complete(
        self, system_prompt: str, user_prompt: str, options: AnalysisOptions
    ) -> Dict[str, Any]:
        if self._retry_config is None:
            return await self._client.complete(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                options=options,
            )
        return await call_with_retry(
            self._client.complete,
            retry_config=self._retry_config,
            should_retry=_is_retryable,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            options=options,
        )


__all__ = [
    "AnalysisError",
    "AnalysisService",
    "AnalysisValidationError",
    "BatchOutcome",
    "MAX_DATA_BYTES",
    "build_analysis_result",
    "validate_analysis_request",
]
