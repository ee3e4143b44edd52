"""Deterministic rendering of the system and user prompts sent to the model.

The user prompt is assembled from an ordered mapping of rendered sections
(data, requirements, then optional context, period and benchmarks) followed by
a fixed closing block. The closing block names the section headings that
:mod:`farm_insights.services.insights` later searches for, so the two modules
must agree on that vocabulary.
"""

from __future__ import annotations

import json
from textwrap import dedent
from types import MappingProxyType
from typing import Any, Dict, Mapping

from farm_insights.schemas import AnalysisType, Requirements
from farm_insights.services.insights import SECTION_MARKERS

PromptSections = Dict[str, str]

_NOT_AVAILABLE = "N/A"

SYSTEM_PREAMBLE = dedent(
    """\
    You are an expert agricultural data analyst specializing in farm operations management.
    Your role is to analyze operational data and provide actionable insights.

    Core Responsibilities:
    1. Analyze data patterns and trends accurately
    2. Identify anomalies, risks, and opportunities
    3. Provide specific, actionable recommendations
    4. Consider industry best practices and standards
    5. Ensure recommendations are practical and implementable

    Output Format:
    - Use clear, professional language
    - Structure insights logically
    - Prioritize recommendations by impact
    - Include relevant metrics and KPIs
    - Highlight critical issues requiring immediate attention"""
)

TYPE_INSTRUCTIONS: Mapping[AnalysisType, str] = MappingProxyType(
    {
        AnalysisType.POULTRY_LAYING: dedent(
            """\
            Poultry Laying Operations Focus:
            - Egg production rates and trends
            - Feed conversion ratios
            - Mortality rates and flock health
            - Peak production timing
            - Age-based performance metrics
            - Environmental factors (temperature, lighting)
            - Compare against industry standards (75-85% lay rate)"""
        ),
        AnalysisType.POULTRY_HATCHING: dedent(
            """\
            Poultry Hatching Operations Focus:
            - Hatchability rates and trends
            - Fertility rates
            - Incubation conditions
            - Chick quality metrics
            - Mortality during hatching
            - Seasonal variations
            - Compare against industry standards (80-90% hatchability)"""
        ),
        AnalysisType.POULTRY_FEEDING: dedent(
            """\
            Poultry Feeding Operations Focus:
            - Feed consumption patterns
            - Feed conversion efficiency (FCR)
            - Growth rates
            - Feed costs vs output value
            - Nutritional adequacy
            - Waste reduction opportunities
            - Target FCR: 1.8-2.2 for layers, 1.5-1.9 for broilers"""
        ),
        AnalysisType.SWINE_BREEDING: dedent(
            """\
            Swine Breeding Operations Focus:
            - Breeding success rates
            - Conception rates
            - Litter sizes
            - Genetic performance
            - Breeding cycle timing
            - Sow productivity metrics
            - Compare against standards (10-12 piglets per litter)"""
        ),
        AnalysisType.SWINE_FARROWING: dedent(
            """\
            Swine Farrowing Operations Focus:
            - Farrowing rates and timing
            - Piglet survival rates
            - Birth weights
            - Litter uniformity
            - Sow condition post-farrowing
            - Weaning metrics
            - Target: 90%+ piglet survival to weaning"""
        ),
        AnalysisType.SWINE_FEEDING: dedent(
            """\
            Swine Feeding Operations Focus:
            - Feed consumption by growth stage
            - Average daily gain (ADG)
            - Feed conversion ratios
            - Growth curve analysis
            - Feed costs optimization
            - Weight gain efficiency
            - Target FCR: 2.5-3.0 for growing pigs"""
        ),
        AnalysisType.SALES_ANALYSIS: dedent(
            """\
            Sales Operations Focus:
            - Revenue trends and patterns
            - Product performance
            - Customer behavior
            - Pricing effectiveness
            - Seasonal variations
            - Profit margins by product/category
            - Market opportunities"""
        ),
        AnalysisType.GENERAL: dedent(
            """\
            General Farm Operations Focus:
            - Overall operational efficiency
            - Resource utilization
            - Cost-benefit analysis
            - Trend identification
            - Performance benchmarking
            - Risk assessment"""
        ),
    }
)

_SUMMARY, _FINDINGS, _RECOMMENDATIONS, _RISKS, _OPPORTUNITIES = (
    marker for _, marker in SECTION_MARKERS
)
METRICS_DASHBOARD_MARKER = "Metrics Dashboard:"

OUTPUT_STRUCTURE = dedent(
    f"""\
    # Required Output Structure

    Please provide your analysis in the following structure. Begin each section
    with its heading on its own line, written exactly as shown (including the colon).

    {_SUMMARY}
    A brief executive summary of the overall situation (2-3 sentences)

    {_FINDINGS}
    - List the most important discoveries from the data
    - Include specific metrics and percentages
    - Highlight any concerning trends

    {_RECOMMENDATIONS}
    Provide actionable recommendations prioritized by:
    1. Critical (immediate action needed)
    2. Important (action within 1 week)
    3. Beneficial (action within 1 month)

    {_RISKS}
    Identify potential risks and their severity level

    {_OPPORTUNITIES}
    Highlight areas for improvement and optimization

    {METRICS_DASHBOARD_MARKER}
    Key performance indicators that should be monitored

    ---

    Please analyze thoroughly and provide specific, data-driven insights."""
)


def _ucfirst(value: str) -> str:
    return value[:1].upper() + value[1:]


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _json_block(payload: Any) -> str:
    rendered = json.dumps(payload, indent=4, ensure_ascii=False, default=str)
    return f"```json\n{rendered}\n```"


def resolve_analysis_type(analysis_type: AnalysisType | str) -> AnalysisType:
    """Map a tag to its enum member, falling back to ``general``."""
    try:
        return AnalysisType(analysis_type)
    except ValueError:
        return AnalysisType.GENERAL


def format_analysis_type(analysis_type: AnalysisType | str) -> str:
    """Render ``poultry_laying`` as ``Poultry Laying``."""
    value = getattr(analysis_type, "value", analysis_type)
    return " ".join(_ucfirst(word) for word in str(value).split("_"))


def build_system_prompt(analysis_type: AnalysisType | str) -> str:
    """Role preamble followed by the focus block for ``analysis_type``."""
    instructions = TYPE_INSTRUCTIONS[resolve_analysis_type(analysis_type)]
    return f"{SYSTEM_PREAMBLE}\n\n{instructions}"


def _render_requirements(requirements: Requirements) -> str:
    lines = [
        "# Analysis Requirements",
        "",
        f"**Depth Level:** {_ucfirst(requirements.depth)}",
    ]
    if requirements.focus_areas:
        lines.append(f"**Focus Areas:** {', '.join(requirements.focus_areas)}")
    if requirements.exclude_areas:
        lines.append(f"**Exclude Areas:** {', '.join(requirements.exclude_areas)}")
    lines.extend(
        [
            f"**Priority Level:** {_ucfirst(requirements.priority_level)}",
            "**Include Recommendations:** "
            f"{_yes_no(requirements.include_recommendations)}",
            f"**Risk Assessment:** {_yes_no(requirements.risk_assessment)}",
            "**Compare to Industry Standards:** "
            f"{_yes_no(requirements.industry_standards)}",
            f"**Output Format:** {_ucfirst(requirements.format)}",
        ]
    )
    return "\n".join(lines)


def build_prompt_sections(
    data: Mapping[str, Any], requirements: Requirements
) -> PromptSections:
    """Render each prompt section in layout order.

    Optional sections are only present when the matching requirement is set.
    """
    sections: PromptSections = {
        "data": f"# Data to Analyze\n\n{_json_block(data)}",
        "requirements": _render_requirements(requirements),
    }
    if requirements.context:
        sections["context"] = f"# Additional Context\n\n{requirements.context}"
    if requirements.period is not None:
        period = requirements.period
        sections["period"] = (
            "# Time Period\n\n"
            f"**From:** {period.from_ or _NOT_AVAILABLE}\n"
            f"**To:** {period.to or _NOT_AVAILABLE}"
        )
    if requirements.benchmarks:
        sections["benchmarks"] = (
            f"# Comparison Benchmarks\n\n{_json_block(requirements.benchmarks)}"
        )
    return sections


def build_user_prompt(
    data: Mapping[str, Any],
    analysis_type: AnalysisType | str,
    requirements: Requirements,
) -> str:
    """Assemble the full user prompt for one analysis request."""
    blocks = [
        "# Farm Operations Analysis Request",
        f"**Analysis Type:** {format_analysis_type(analysis_type)}",
        *build_prompt_sections(data, requirements).values(),
        OUTPUT_STRUCTURE,
    ]
    return "\n\n".join(blocks)


__all__ = [
    "METRICS_DASHBOARD_MARKER",
    "OUTPUT_STRUCTURE",
    "PromptSections",
    "SYSTEM_PREAMBLE",
    "TYPE_INSTRUCTIONS",
    "build_prompt_sections",
    "build_system_prompt",
    "build_user_prompt",
    "format_analysis_type",
    "resolve_analysis_type",
]
