try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from farm_insights.schemas import ParsedInsights
from farm_insights.services.insights import extract_insights, extract_section

FULL_RESPONSE = """\
Summary:
Production is steady.

Key Findings:
- Mortality rose to 2.1% in week 6

Recommendations:
1. Critical: inspect ventilation

Risks:
Heat stress in July

Opportunities:
Contract pricing with the local mill

Metrics Dashboard:
Laying rate, FCR
"""


def test_all_sections_are_sliced_in_order() -> None:
    insights = extract_insights(FULL_RESPONSE)

    assert insights.summary == "Production is steady."
    assert insights.key_findings == "- Mortality rose to 2.1% in week 6"
    assert insights.recommendations == "1. Critical: inspect ventilation"
    assert insights.risks == "Heat stress in July"
    assert insights.opportunities.startswith("Contract pricing with the local mill")
    assert "Metrics Dashboard:" in insights.opportunities


def test_no_headings_yield_empty_sections() -> None:
    assert extract_insights("The flock looks healthy overall.") == ParsedInsights()
    assert extract_insights("") == ParsedInsights()


def test_partial_headings_leave_missing_sections_empty() -> None:
    content = "Key Findings: feed costs up 12%\nRecommendations: renegotiate supplier"

    insights = extract_insights(content)

    assert insights.summary == ""
    assert insights.key_findings == "feed costs up 12%"
    assert insights.recommendations == "renegotiate supplier"
    assert insights.risks == ""
    assert insights.opportunities == ""


def test_headings_match_case_insensitively() -> None:
    insights = extract_insights("SUMMARY: all good\nkey findings: none")

    assert insights.summary == "all good"
    assert insights.key_findings == "none"


def test_missing_end_marker_runs_to_end_of_text() -> None:
    assert extract_section("Risks: drought\nmore text", "Risks:", "Opportunities:") == (
        "drought\nmore text"
    )


def test_end_marker_before_start_is_ignored() -> None:
    content = "Risks: early mention\nSummary: the summary text"

    assert extract_section(content, "Summary:", "Risks:") == "the summary text"


def test_missing_start_marker_returns_empty_string() -> None:
    assert extract_section("nothing to see", "Summary:", "Key Findings:") == ""


def test_heading_quoted_in_earlier_prose_shifts_that_section() -> None:
    content = (
        "Summary: see the Risks: list for details.\n"
        "Key Findings: egg weight down\n"
        "Recommendations: adjust ration\n"
        "Risks: heat stress\n"
        "Opportunities: organic premium"
    )

    insights = extract_insights(content)

    # Only the first "Risks:" counts, so the risks slice starts in the summary.
    assert insights.summary == "see the Risks: list for details."
    assert insights.recommendations == "adjust ration"
    assert insights.risks.startswith("list for details.")
    assert "Key Findings: egg weight down" in insights.risks
    assert insights.risks.endswith("Risks: heat stress")
    assert insights.opportunities == "organic premium"
