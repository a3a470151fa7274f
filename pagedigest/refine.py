"""Condense a raw extraction into a size-capped, persistence-ready document.

Every list in :class:`~pagedigest.items.RefinedDocument` has a fixed maximum
length.  When the heading walk found nothing, a minimal outline is
synthesized from the flat ``h1``/``h2`` lists; when no section containers
were found, sections are synthesized from the outline.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pagedigest import settings
from pagedigest.extractors.text import clean_paragraph_text, sanitize_plain_text, truncate_text
from pagedigest.items import (
    ImageRef,
    LinkRef,
    MainHeadings,
    NavLink,
    OutlineNode,
    RawExtraction,
    RefinedDocument,
    SectionBlock,
    TextBlock,
)

logger = logging.getLogger(__name__)

# Metadata keys kept first; remaining slots fill from any other non-empty key
METADATA_ALLOWED_KEYS: tuple[str, ...] = (
    "author",
    "og:title",
    "og:description",
    "og:image",
    "og:url",
    "og:type",
    "twitter:title",
    "twitter:description",
    "twitter:image",
    "twitter:card",
    "canonical",
    "language",
    "charset",
    "viewport",
    "robots",
    "generator",
    "themeColor",
)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def sanitize_metadata(
    metadata: Mapping[str, Any],
    limit: int = settings.METADATA_KEY_LIMIT,
) -> dict[str, str]:
    """Keep allow-listed keys, then fill up to *limit* from the rest."""
    sanitized: dict[str, str] = {}
    for key in METADATA_ALLOWED_KEYS:
        if len(sanitized) >= limit:
            break
        value = metadata.get(key)
        if value:
            sanitized[key] = str(value)

    for key, value in metadata.items():
        if len(sanitized) >= limit:
            break
        if key in sanitized or value is None or value == "":
            continue
        sanitized[key] = str(value)

    return sanitized


# ---------------------------------------------------------------------------
# Fallback synthesis
# ---------------------------------------------------------------------------

def build_fallback_outline(h1: list[str], h2: list[str]) -> list[OutlineNode]:
    """Minimal outline from flat heading lists.

    One level-1 node per ``h1`` (up to 5).  ``h2`` entries (up to 8) nest
    under the *first* ``h1`` node only; without any ``h1`` they become
    level-2 roots instead.
    """
    outline = [
        OutlineNode(id=f"legacy-h1-{index}", title=title, level=1)
        for index, title in enumerate(h1[: settings.FALLBACK_H1_LIMIT])
    ]

    h2_titles = h2[: settings.FALLBACK_H2_LIMIT]
    if not outline:
        return [
            OutlineNode(id=f"legacy-h2-{index}", title=title, level=2)
            for index, title in enumerate(h2_titles)
        ]

    outline[0].sub_sections = [
        OutlineNode(id=f"legacy-h2-child-{index}", title=title, level=2)
        for index, title in enumerate(h2_titles)
    ]
    return outline


def build_fallback_sections(outline: list[OutlineNode]) -> list[SectionBlock]:
    """One section per leading outline node (up to 6)."""
    sections: list[SectionBlock] = []
    for node in outline[: settings.FALLBACK_SECTION_LIMIT]:
        sections.append(
            SectionBlock(
                id=f"legacy-section-{node.id}",
                heading=node.title,
                subheading=node.sub_sections[0].title if node.sub_sections else None,
                summary=node.summary,
                paragraphs=list(node.paragraphs),
                links=list(node.links),
                images=list(node.images),
                tag="section",
            ),
        )
    return sections


# ---------------------------------------------------------------------------
# Section normalization / text blocks
# ---------------------------------------------------------------------------

def normalize_sections(sections: list[SectionBlock]) -> list[SectionBlock]:
    """Re-sanitize and re-truncate section content; renumber ``order``."""
    normalized: list[SectionBlock] = []
    for index, section in enumerate(sections):
        paragraphs = [
            p for p in (
                truncate_text(clean_paragraph_text(raw), settings.REFINED_PARAGRAPH_CHARS)
                for raw in section.paragraphs
            ) if p
        ]
        list_items = [
            item for item in (
                truncate_text(clean_paragraph_text(raw), settings.REFINED_LIST_ITEM_CHARS)
                for raw in section.list_items
            ) if item
        ]
        links = [
            LinkRef(text=truncate_text(link.text, settings.LINK_TEXT_CHARS), href=link.href)
            for link in section.links
        ]
        images = [
            ImageRef(src=img.src, alt=truncate_text(img.alt, settings.IMAGE_ALT_CHARS))
            for img in section.images
        ]
        normalized.append(
            SectionBlock(
                id=section.id or f"section-{index + 1}",
                order=index + 1,
                heading=section.heading or None,
                subheading=section.subheading or None,
                summary=section.summary or (paragraphs[0] if paragraphs else "")
                or (list_items[0] if list_items else ""),
                paragraphs=paragraphs,
                list_items=list_items,
                links=links,
                images=images,
                has_call_to_action=section.has_call_to_action,
                tag=section.tag or None,
                classes=[c.strip() for c in section.classes if c and c.strip()],
                body=sanitize_plain_text(section.body)[: settings.SECTION_BODY_CHARS],
                tone=section.tone or None,
                accent_color=section.accent_color or None,
            ),
        )
    return normalized


def build_text_blocks(sections: list[SectionBlock]) -> list[TextBlock]:
    """Flattened per-section text used by downstream renderers."""
    blocks: list[TextBlock] = []
    for index, section in enumerate(sections[: settings.TEXT_BLOCK_LIMIT]):
        combined = [entry for entry in (*section.paragraphs, *section.list_items) if entry]
        blocks.append(
            TextBlock(
                id=section.id or f"text-block-{index}",
                heading=section.heading or section.summary or section.tag or f"Section {index + 1}",
                subheading=section.subheading or "",
                summary=section.summary or (combined[0] if combined else ""),
                body="\n\n".join(combined)[: settings.SECTION_BODY_CHARS],
                paragraphs=combined[: settings.TEXT_BLOCK_PARAGRAPHS],
                tag=section.tag,
                tone=section.tone,
                accent_color=section.accent_color,
            ),
        )
    return blocks


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def refine_scraped_data(raw: RawExtraction | Mapping[str, Any]) -> RefinedDocument:
    """Condense *raw* into a :class:`RefinedDocument` with every cap enforced.

    Args:
        raw: A :class:`RawExtraction` or its (camelCase or snake_case) dict form.
             Missing fields take their empty defaults, so a partial stored
             record still refines to an (empty) document.
    """
    data = raw if isinstance(raw, RawExtraction) else RawExtraction.model_validate(raw)

    h1 = data.headings.h1
    h2 = data.headings.h2

    important_links = [
        LinkRef(text=link.text[: settings.REFINED_LINK_TEXT], href=link.href)
        for link in data.links[: settings.REFINED_LINK_LIMIT]
    ]
    main_images = [
        ImageRef(src=img.src, alt=img.alt[: settings.REFINED_IMAGE_ALT])
        for img in data.images[: settings.REFINED_IMAGE_LIMIT]
    ]
    navigation_links = [
        NavLink(
            text=item.text[: settings.REFINED_NAVIGATION_TEXT],
            href=item.href,
            area=item.area,
        )
        for item in data.navigation[: settings.REFINED_NAVIGATION_LIMIT]
    ]

    if data.content_outline:
        content_outline = data.content_outline[: settings.REFINED_OUTLINE_LIMIT]
    else:
        content_outline = build_fallback_outline(h1, h2)
        if content_outline:
            logger.debug("Synthesized %d outline node(s) for %s", len(content_outline), data.url)

    if data.content_sections:
        raw_sections = data.content_sections[: settings.REFINED_SECTION_LIMIT]
    else:
        raw_sections = build_fallback_sections(content_outline)

    sections = normalize_sections(raw_sections)[: settings.REFINED_SECTION_LIMIT]

    return RefinedDocument(
        url=data.url,
        title=data.title,
        description=data.description,
        keywords=list(data.keywords),
        main_headings=MainHeadings(
            h1=h1[: settings.MAIN_HEADINGS_H1],
            h2=h2[: settings.MAIN_HEADINGS_H2],
        ),
        important_links=important_links,
        image_count=len(data.images),
        main_images=main_images,
        text_preview=data.text[: settings.TEXT_PREVIEW_CHARS],
        full_text=data.text[: settings.FULL_TEXT_CHARS],
        metadata=sanitize_metadata(data.metadata),
        navigation_links=navigation_links,
        content_outline=content_outline,
        content_sections=sections,
        text_blocks=build_text_blocks(sections),
        stats=data.stats,
        domain_info=data.domain_info,
        structured_data_count=len(data.structured_data),
        structured_data_samples=data.structured_data[: settings.STRUCTURED_DATA_SAMPLES],
        scraped_at=data.scraped_at or datetime.now(UTC).isoformat(),
    )
