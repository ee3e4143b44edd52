"""Slice free-text model output into named insight sections.

Extraction is purely syntactic: each field runs from its heading to the next
heading in :data:`SECTION_MARKERS`. Only the first case-insensitive match of a
heading is used, so a heading word quoted earlier in the prose (for example
"Risks:" inside the summary) shifts the boundaries. A missing heading yields an
empty string; extraction never raises.
"""

from __future__ import annotations

import re
from typing import Optional

from farm_insights.schemas import ParsedInsights

SECTION_MARKERS: tuple[tuple[str, str], ...] = (
    ("summary", "Summary:"),
    ("key_findings", "Key Findings:"),
    ("recommendations", "Recommendations:"),
    ("risks", "Risks:"),
    ("opportunities", "Opportunities:"),
)


def _find(content: str, marker: str, start: int = 0) -> Optional[re.Match[str]]:
    return re.compile(re.escape(marker), re.IGNORECASE).search(content, start)


def extract_section(
    content: str, start_marker: str, end_marker: Optional[str] = None
) -> str:
    """Return the trimmed text between ``start_marker`` and ``end_marker``.

    Without an end marker, or when it does not occur after the start marker,
    the section runs to the end of ``content``.
    """
    start = _find(content, start_marker)
    if start is None:
        return ""

    if end_marker:
        end = _find(content, end_marker, start.end())
        if end is not None:
            return content[start.end() : end.start()].strip()

    return content[start.end() :].strip()


def extract_insights(content: str) -> ParsedInsights:
    """Extract every section of :data:`SECTION_MARKERS` from ``content``."""
    sections: dict[str, str] = {}
    for index, (field, start_marker) in enumerate(SECTION_MARKERS):
        end_marker = (
            SECTION_MARKERS[index + 1][1] if index + 1 < len(SECTION_MARKERS) else None
        )
        sections[field] = extract_section(content or "", start_marker, end_marker)
    return ParsedInsights(**sections)


__all__ = ["SECTION_MARKERS", "extract_insights", "extract_section"]
