"""Heading outline builder.

Walks ``h1``–``h3`` in document order and nests them into a forest using a
stack of open nodes.  Each heading owns the content found by a forward scan
of its following siblings (the sibling-scan).

Example::

    <h1>Intro</h1><p>Hello</p><h2>Sub</h2><p>More</p>

    → [Intro(level 1, paragraphs=["Hello"],
             sub_sections=[Sub(level 2, paragraphs=["More"])])]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from pagedigest import settings
from pagedigest.extractors.links import dedupe_by_href, scoped_images, scoped_links
from pagedigest.extractors.text import (
    clean_paragraph_text,
    collapse_whitespace,
    count_words,
    truncate_text,
)
from pagedigest.items import ImageRef, LinkRef, OutlineNode

logger = logging.getLogger(__name__)

# Heading tags that open an outline node
_OUTLINE_TAGS: tuple[str, ...] = ("h1", "h2", "h3")
_HEADING_LEVELS: dict[str, int] = {f"h{i}": i for i in range(1, 7)}
_LIST_TAGS = frozenset({"ul", "ol"})


@dataclass
class SectionContent:
    """Content gathered under one heading by the sibling-scan."""

    paragraphs: list[str] = field(default_factory=list)
    bullets: list[list[str]] = field(default_factory=list)
    links: list[LinkRef] = field(default_factory=list)
    images: list[ImageRef] = field(default_factory=list)
    word_count: int = 0
    visited: int = 0

    @property
    def body(self) -> str:
        pieces = [*self.paragraphs, *(item for group in self.bullets for item in group)]
        return "\n\n".join(p for p in pieces if p)


def heading_level(tag: Tag) -> int | None:
    """Return 1–6 for ``<h1>``–``<h6>``, else None."""
    return _HEADING_LEVELS.get((tag.name or "").lower())


def _list_items(node: Tag) -> list[str]:
    items: list[str] = []
    for li in node.find_all("li"):
        text = clean_paragraph_text(li.get_text(separator=" "))
        if text:
            items.append(truncate_text(text, settings.OUTLINE_BULLET_CHARS))
    return items


def collect_section_content(
    heading: Tag,
    level: int,
    base_url: str = "",
    guard_limit: int = settings.SIBLING_GUARD_LIMIT,
) -> SectionContent:
    """Scan the siblings after *heading* and gather the content it owns.

    The scan stops at the next outline heading (``h1``–``h3``): a heading of
    the same or a shallower level closes this node, and a deeper one starts
    a child that owns what follows.  Deeper non-outline headings (``h4``+)
    are passed over.  At most *guard_limit* siblings are visited.
    """
    content = SectionContent()
    paragraphs: list[str] = []
    links: list[LinkRef] = []
    images: list[ImageRef] = []

    node = heading.find_next_sibling()
    while node is not None and content.visited < guard_limit:
        tag = (node.name or "").lower()
        next_level = _HEADING_LEVELS.get(tag)
        if next_level is not None and (next_level <= level or tag in _OUTLINE_TAGS):
            break

        if tag == "p":
            cleaned = clean_paragraph_text(node.get_text(separator=" "))
            if cleaned:
                paragraphs.append(truncate_text(cleaned, settings.OUTLINE_PARAGRAPH_CHARS))
                content.word_count += count_words(cleaned)
        elif tag in _LIST_TAGS:
            items = _list_items(node)
            if items:
                content.bullets.append(items[: settings.OUTLINE_BULLET_ITEMS])

        links.extend(scoped_links(node, base_url))
        images.extend(scoped_images(node, base_url))

        node = node.find_next_sibling()
        content.visited += 1

    content.paragraphs = paragraphs[: settings.OUTLINE_PARAGRAPH_LIMIT]
    content.bullets = content.bullets[: settings.OUTLINE_BULLET_GROUPS]
    content.links = dedupe_by_href(links)[: settings.OUTLINE_LINK_LIMIT]
    content.images = dedupe_by_href(images)[: settings.OUTLINE_IMAGE_LIMIT]
    return content


def build_content_outline(
    soup: BeautifulSoup,
    base_url: str = "",
    limit: int = settings.OUTLINE_LIMIT,
) -> list[OutlineNode]:
    """Build the heading forest of the page (at most *limit* roots)."""
    outline: list[OutlineNode] = []
    stack: list[OutlineNode] = []

    for index, element in enumerate(soup.find_all(list(_OUTLINE_TAGS))):
        if not isinstance(element, Tag):
            continue
        level = heading_level(element)
        if level is None:
            continue
        title = collapse_whitespace(element.get_text(separator=" "))
        if not title:
            continue

        content = collect_section_content(element, level, base_url)
        node = OutlineNode(
            id=str(element.get("id") or "").strip() or f"outline-{index + 1}",
            title=truncate_text(title, settings.OUTLINE_TITLE_LIMIT),
            level=level,
            summary=content.paragraphs[0] if content.paragraphs else "",
            paragraphs=content.paragraphs,
            bullets=content.bullets,
            links=content.links,
            images=content.images,
            word_count=content.word_count,
            body=content.body,
        )

        while stack and stack[-1].level >= level:
            stack.pop()

        if stack:
            stack[-1].sub_sections.append(node)
        else:
            outline.append(node)
        stack.append(node)

    if len(outline) > limit:
        logger.debug("Outline truncated from %d to %d roots", len(outline), limit)
    return outline[:limit]
