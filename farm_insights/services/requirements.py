"""Merge caller-supplied analysis requirements over the default record."""

from __future__ import annotations

from typing import Any, Mapping

from farm_insights.schemas import Requirements

DEFAULT_REQUIREMENTS = Requirements()


def normalize_requirements(
    partial: Mapping[str, Any] | Requirements | None = None,
) -> Requirements:
    """Return a complete requirements record.

    Every field missing from ``partial`` takes its default; unknown keys are
    passed through untouched. Any JSON-decoded mapping is accepted, values of
    the wrong shape are coerced rather than rejected. The caller's mapping is
    never modified.
    """
    if partial is None:
        return DEFAULT_REQUIREMENTS
    if isinstance(partial, Requirements):
        return partial
    return Requirements.model_validate(dict(partial))


__all__ = ["DEFAULT_REQUIREMENTS", "normalize_requirements"]
