"""Service layer exports."""

from .analysis import AnalysisError, AnalysisService, AnalysisValidationError
from .analysis_cache import AnalysisCache, compute_cache_key
from .insights import extract_insights, extract_section
from .prompts import build_system_prompt, build_user_prompt
from .requirements import DEFAULT_REQUIREMENTS, normalize_requirements

__all__ = [
    "AnalysisCache",
    "AnalysisError",
    "AnalysisService",
    "AnalysisValidationError",
    "DEFAULT_REQUIREMENTS",
    "build_system_prompt",
    "build_user_prompt",
    "compute_cache_key",
    "extract_insights",
    "extract_section",
    "normalize_requirements",
]
