try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from farm_insights.schemas import Requirements
from farm_insights.services.requirements import (
    DEFAULT_REQUIREMENTS,
    normalize_requirements,
)


def test_empty_and_missing_requirements_equal_defaults() -> None:
    assert normalize_requirements(None) == DEFAULT_REQUIREMENTS
    assert normalize_requirements({}) == DEFAULT_REQUIREMENTS

    defaults = DEFAULT_REQUIREMENTS
    assert defaults.depth == "standard"
    assert defaults.focus_areas == ()
    assert defaults.exclude_areas == ()
    assert defaults.compare_to_previous is False
    assert defaults.include_recommendations is True
    assert defaults.include_visualizations is False
    assert defaults.priority_level == "medium"
    assert defaults.industry_standards is True
    assert defaults.risk_assessment is True
    assert defaults.forecast is False
    assert defaults.format == "structured"
    assert defaults.context is None
    assert defaults.period is None
    assert defaults.benchmarks is None


def test_supplied_fields_override_and_input_is_untouched() -> None:
    partial = {"depth": "comprehensive", "forecast": True}
    normalized = normalize_requirements(partial)

    assert normalized.depth == "comprehensive"
    assert normalized.forecast is True
    assert normalized.priority_level == "medium"
    assert partial == {"depth": "comprehensive", "forecast": True}


def test_unknown_keys_pass_through() -> None:
    normalized = normalize_requirements({"language": "fr"})

    assert normalized.model_extra == {"language": "fr"}
    assert normalized.model_dump()["language"] == "fr"


def test_focus_areas_accept_comma_separated_string() -> None:
    normalized = normalize_requirements(
        {"focus_areas": "mortality, feed conversion ,", "exclude_areas": ["sales"]}
    )

    assert normalized.focus_areas == ("mortality", "feed conversion")
    assert normalized.exclude_areas == ("sales",)


def test_period_accepts_from_alias_and_empty_period_is_dropped() -> None:
    normalized = normalize_requirements({"period": {"from": "2024-01-01"}})
    assert normalized.period is not None
    assert normalized.period.from_ == "2024-01-01"
    assert normalized.period.to is None

    assert normalize_requirements({"period": {}}).period is None


def test_requirements_instance_is_returned_as_is() -> None:
    requirements = Requirements(depth="basic")
    assert normalize_requirements(requirements) is requirements


def test_wrongly_typed_values_are_coerced_instead_of_rejected() -> None:
    normalized = normalize_requirements(
        {
            "depth": 3,
            "priority_level": None,
            "focus_areas": ["pens", 2, None],
            "exclude_areas": 7,
            "forecast": "definitely",
            "risk_assessment": "no",
            "include_recommendations": 0,
            "context": {"note": "wet season"},
            "period": {"from": 20240101, "to": None},
            "benchmarks": [0.9, 0.85],
        }
    )

    assert normalized.depth == "3"
    assert normalized.priority_level == "medium"
    assert normalized.focus_areas == ("pens", "2")
    assert normalized.exclude_areas == ("7",)
    assert normalized.forecast is True
    assert normalized.risk_assessment is False
    assert normalized.include_recommendations is False
    assert normalized.context == '{"note": "wet season"}'
    assert normalized.period.from_ == "20240101"
    assert normalized.period.to is None
    assert normalized.benchmarks == [0.9, 0.85]


@pytest.mark.parametrize("period", ["2024-Q1", [1, 2], 0, {}])
def test_period_that_is_not_a_mapping_is_treated_as_absent(period) -> None:
    assert normalize_requirements({"period": period}).period is None
