try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from farm_insights.schemas import AnalysisType
from farm_insights.services.insights import SECTION_MARKERS
from farm_insights.services.prompts import (
    OUTPUT_STRUCTURE,
    SYSTEM_PREAMBLE,
    TYPE_INSTRUCTIONS,
    build_prompt_sections,
    build_system_prompt,
    build_user_prompt,
    format_analysis_type,
)
from farm_insights.services.requirements import normalize_requirements

SAMPLE_DATA = {"house": "B", "eggs_collected": [1200, 1185, 1190]}


def test_every_analysis_type_has_instructions() -> None:
    assert set(TYPE_INSTRUCTIONS) == set(AnalysisType)


@pytest.mark.parametrize("analysis_type", list(AnalysisType))
def test_system_prompt_is_preamble_plus_type_block(analysis_type: AnalysisType) -> None:
    prompt = build_system_prompt(analysis_type)

    assert prompt.startswith(SYSTEM_PREAMBLE)
    assert prompt.endswith(TYPE_INSTRUCTIONS[analysis_type])


def test_system_prompt_falls_back_to_general_for_unknown_type() -> None:
    assert build_system_prompt("goat_milking") == build_system_prompt(AnalysisType.GENERAL)


def test_format_analysis_type_title_cases_words() -> None:
    assert format_analysis_type(AnalysisType.POULTRY_LAYING) == "Poultry Laying"
    assert format_analysis_type("sales_analysis") == "Sales Analysis"


def test_user_prompt_orders_sections() -> None:
    requirements = normalize_requirements(
        {
            "context": "Flock moved to new housing in March",
            "period": {"from": "2024-03-01", "to": "2024-03-31"},
            "benchmarks": {"laying_rate": 0.9},
        }
    )
    prompt = build_user_prompt(SAMPLE_DATA, AnalysisType.POULTRY_LAYING, requirements)

    headings = [
        "# Farm Operations Analysis Request",
        "**Analysis Type:** Poultry Laying",
        "# Data to Analyze",
        "# Analysis Requirements",
        "# Additional Context",
        "# Time Period",
        "# Comparison Benchmarks",
        "# Required Output Structure",
    ]
    positions = [prompt.index(heading) for heading in headings]
    assert positions == sorted(positions)
    assert prompt.endswith(OUTPUT_STRUCTURE)
    assert "**From:** 2024-03-01" in prompt
    assert "**To:** 2024-03-31" in prompt
    assert '"laying_rate": 0.9' in prompt


def test_optional_sections_are_omitted_when_unset() -> None:
    sections = build_prompt_sections(SAMPLE_DATA, normalize_requirements(None))

    assert list(sections) == ["data", "requirements"]


def test_period_with_missing_end_renders_not_available() -> None:
    requirements = normalize_requirements({"period": {"from": "2024-01-01"}})
    sections = build_prompt_sections(SAMPLE_DATA, requirements)

    assert sections["period"].endswith("**To:** N/A")


def test_requirements_block_renders_flags() -> None:
    requirements = normalize_requirements(
        {
            "depth": "comprehensive",
            "priority_level": "high",
            "focus_areas": ["mortality", "feed"],
            "risk_assessment": False,
        }
    )
    block = build_prompt_sections(SAMPLE_DATA, requirements)["requirements"]

    assert "**Depth Level:** Comprehensive" in block
    assert "**Focus Areas:** mortality, feed" in block
    assert "**Exclude Areas:**" not in block
    assert "**Priority Level:** High" in block
    assert "**Include Recommendations:** Yes" in block
    assert "**Risk Assessment:** No" in block
    assert "**Compare to Industry Standards:** Yes" in block
    assert "**Output Format:** Structured" in block


def test_data_block_is_pretty_printed_json() -> None:
    block = build_prompt_sections({"feed": "maïs"}, normalize_requirements(None))["data"]

    assert '```json\n{\n    "feed": "maïs"\n}\n```' in block


def test_closing_block_names_every_extraction_heading() -> None:
    for _, marker in SECTION_MARKERS:
        assert f"\n{marker}\n" in OUTPUT_STRUCTURE


def test_user_prompt_is_deterministic() -> None:
    requirements = normalize_requirements({"context": "quarterly"})
    first = build_user_prompt(SAMPLE_DATA, "general", requirements)
    second = build_user_prompt(dict(SAMPLE_DATA), "general", requirements)

    assert first == second
