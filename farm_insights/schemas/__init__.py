"""Public schema exports."""

from .analysis import (
    AdvancedAnalyzeRequest,
    AnalysisOptions,
    AnalysisResult,
    AnalysisType,
    AnalyzeRequest,
    BatchAnalyzeRequest,
    BatchItemError,
    ParsedInsights,
    Period,
    Requirements,
    TokenUsage,
)

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
