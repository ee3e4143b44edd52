"""
Pydantic models for farm analysis requests, requirements and results.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

_FALSE_WORDS = frozenset({"", "0", "false", "no", "off", "n", "f"})


def _as_text(value: Any) -> str:
    """Render any JSON value as text; strings pass through unchanged."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_WORDS
    return bool(value)


def _as_areas(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(area.strip() for area in value.split(",") if area.strip())
    if isinstance(value, Mapping):
        value = list(value.values())
    elif isinstance(value, (set, frozenset)):
        value = sorted(value, key=_as_text)
    elif not isinstance(value, (list, tuple)):
        value = [value]
    return tuple(_as_text(area) for area in value if area is not None)


class AnalysisType(str, Enum):
    """Supported analysis types; each selects its own system instructions."""

    POULTRY_LAYING = "poultry_laying"
    POULTRY_HATCHING = "poultry_hatching"
    POULTRY_FEEDING = "poultry_feeding"
    SWINE_BREEDING = "swine_breeding"
    SWINE_FARROWING = "swine_farrowing"
    SWINE_FEEDING = "swine_feeding"
    SALES_ANALYSIS = "sales_analysis"
    GENERAL = "general"


class Period(BaseModel):
    """Time window the analysed data covers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _endpoint_as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else _as_text(value)


class Requirements(BaseModel):
    """Fully normalized analysis requirements.

    Any JSON value is accepted for every field: text fields render other
    values as JSON text, flags follow truthiness and area lists accept a
    comma-separated string, a single value or any sequence. Unknown keys are
    kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    depth: str = Field("standard", description="One of basic, standard, comprehensive.")
    focus_areas: Tuple[str, ...] = ()
    exclude_areas: Tuple[str, ...] = ()
    compare_to_previous: bool = False
    include_recommendations: bool = True
    include_visualizations: bool = False
    priority_level: str = Field("medium", description="One of low, medium, high, critical.")
    industry_standards: bool = True
    risk_assessment: bool = True
    forecast: bool = False
    format: str = Field(
        "structured", description="One of structured, narrative, executive_summary."
    )
    context: Optional[str] = None
    period: Optional[Period] = None
    benchmarks: Any = None

    @field_validator("depth", "priority_level", "format", mode="before")
    @classmethod
    def _level_as_text(cls, value: Any, info: ValidationInfo) -> str:
        if value is None:
            return cls.model_fields[info.field_name].default
        return _as_text(value)

    @field_validator(
        "compare_to_previous",
        "include_recommendations",
        "include_visualizations",
        "industry_standards",
        "risk_assessment",
        "forecast",
        mode="before",
    )
    @classmethod
    def _flag(cls, value: Any, info: ValidationInfo) -> bool:
        if value is None:
            return cls.model_fields[info.field_name].default
        return _as_flag(value)

    @field_validator("focus_areas", "exclude_areas", mode="before")
    @classmethod
    def _split_areas(cls, value: Any) -> Tuple[str, ...]:
        return _as_areas(value)

    @field_validator("context", mode="before")
    @classmethod
    def _context_as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else _as_text(value)

    @field_validator("period", mode="before")
    @classmethod
    def _drop_unusable_period(cls, value: Any) -> Any:
        if isinstance(value, Period):
            return value
        if not value or not isinstance(value, Mapping):
            return None
        return dict(value)


class AnalysisOptions(BaseModel):
    """Transport-level overrides applied to a single completion call."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0)
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    cache: bool = Field(True, description="Read and write the analysis cache.")


class TokenUsage(BaseModel):
    prompt: int = 0
    completion: int = 0
    total: int = 0


class ParsedInsights(BaseModel):
    """Sections sliced out of the model output; empty when a heading is missing."""

    summary: str = ""
    key_findings: str = ""
    recommendations: str = ""
    risks: str = ""
    opportunities: str = ""


class AnalysisResult(BaseModel):
    """Outcome of one successful completion call."""

    model_config = ConfigDict(protected_namespaces=())

    analysis_type: str
    content: str = ""
    model_used: str = "unknown"
    tokens_used: TokenUsage = Field(default_factory=TokenUsage)
    timestamp: str = Field(..., description="Completion instant, ISO-8601 in UTC.")
    parsed_insights: ParsedInsights = Field(default_factory=ParsedInsights)


class BatchItemError(BaseModel):
    """Per-dataset failure record returned from batch analysis."""

    error: bool = True
    message: str


class AnalyzeRequest(BaseModel):
    """Payload to request a single analysis."""

    data: Dict[str, Any] = Field(..., description="Operational dataset to analyze.")
    analysis_type: str = Field(
        AnalysisType.GENERAL.value,
        description="Analysis type tag, e.g. 'poultry_laying'.",
    )
    requirements: Optional[Dict[str, Any]] = Field(
        None, description="Partial requirements merged over the defaults."
    )
    options: Optional[AnalysisOptions] = None


class BatchAnalyzeRequest(BaseModel):
    """Payload to analyze several named datasets with shared settings."""

    datasets: Dict[str, Dict[str, Any]] = Field(
        ..., description="Datasets keyed by a caller-chosen name."
    )
    analysis_type: str = Field(AnalysisType.GENERAL.value)
    requirements: Optional[Dict[str, Any]] = None
    options: Optional[AnalysisOptions] = None


class AdvancedAnalyzeRequest(BaseModel):
    """Payload for the preset comprehensive analysis."""

    data: Dict[str, Any]
    type: str = Field(AnalysisType.GENERAL.value, description="Analysis type tag.")


__all__ = [
    "AdvancedAnalyzeRequest",
    "AnalysisOptions",
    "AnalysisResult",
    "AnalysisType",
    "AnalyzeRequest",
    "BatchAnalyzeRequest",
    "BatchItemError",
    "ParsedInsights",
    "Period",
    "Requirements",
    "TokenUsage",
]
