"""Re-scrape comparison between a stored and a fresh refined document.

Pure-function, no network calls.  Compares aggregate fields only (title,
description, keyword/section/link/image counts, text length); section and
link identities are not matched across scrapes.

Usage::

    from pagedigest.diff import compare_documents

    result = compare_documents(stored, fresh)
    if result.has_changes:
        print("\\n".join(result.summary))
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pagedigest.items import RefinedDocument

NO_CHANGES = "No content differences detected between the stored data and the latest scrape."
UNCOMPARABLE = "Unable to compare content."


@dataclass
class ChangeSummary:
    """Result of a re-scrape comparison."""

    has_changes: bool
    summary: list[str] = field(default_factory=list)


def _as_document(value: RefinedDocument | Mapping[str, Any] | None) -> RefinedDocument | None:
    if value is None:
        return None
    if isinstance(value, RefinedDocument):
        return value
    return RefinedDocument.model_validate(value)


def section_count(doc: RefinedDocument) -> int:
    if doc.content_sections:
        return len(doc.content_sections)
    if doc.stats.section_count:
        return doc.stats.section_count
    return len(doc.main_headings.h1) + len(doc.main_headings.h2)


def text_length(doc: RefinedDocument) -> int:
    return len(doc.full_text) or len(doc.text_preview)


def compare_documents(
    previous: RefinedDocument | Mapping[str, Any] | None,
    current: RefinedDocument | Mapping[str, Any] | None,
) -> ChangeSummary:
    """List the aggregate differences between *previous* and *current*."""
    prev = _as_document(previous)
    curr = _as_document(current)
    if prev is None or curr is None:
        return ChangeSummary(has_changes=False, summary=[UNCOMPARABLE])

    summary: list[str] = []

    if prev.title != curr.title:
        summary.append("Page title changed.")
    if prev.description != curr.description:
        summary.append("Description text updated.")

    counts: tuple[tuple[str, int, int], ...] = (
        ("Keywords count", len(prev.keywords), len(curr.keywords)),
        ("Section count", section_count(prev), section_count(curr)),
        ("Important links count", len(prev.important_links), len(curr.important_links)),
        ("Image count", prev.image_count, curr.image_count),
    )
    for label, before, after in counts:
        if before != after:
            summary.append(f"{label} changed ({before} → {after}).")

    if text_length(prev) != text_length(curr):
        summary.append("Body text length changed.")

    if not summary:
        return ChangeSummary(has_changes=False, summary=[NO_CHANGES])
    return ChangeSummary(has_changes=True, summary=summary)
