"""Section block extraction from structural containers.

Independent of the heading outline: every ``<section>`` / ``<article>`` is
turned into a flat :class:`~pagedigest.items.SectionBlock`, so a page built
from container markup without headings still yields content.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from pagedigest import settings
from pagedigest.extractors.links import dedupe_by_href, image_from_tag, link_from_anchor
from pagedigest.extractors.text import clean_paragraph_text, collapse_whitespace, truncate_text
from pagedigest.items import ImageRef, LinkRef, SectionBlock

logger = logging.getLogger(__name__)

_CONTAINER_TAGS: tuple[str, ...] = ("section", "article")

# Keyword family → tone, checked in this order; first match wins
TONE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("success", ("success", "positive", "approved", "green", "complete")),
    ("warning", ("warning", "pending", "amber", "orange", "notice")),
    ("danger", ("danger", "error", "critical", "red", "alert")),
    ("info", ("info", "primary", "blue", "highlight", "promo")),
    ("neutral", ("muted", "secondary", "gray")),
)

_BACKGROUND_RE = re.compile(r"background(?:-color)?\s*:\s*([^;]+)", re.IGNORECASE)
_BORDER_RE = re.compile(r"border(?:-color)?\s*:\s*([^;]+)", re.IGNORECASE)

_CTA_SELECTOR = 'button, a[class*="btn"], .cta, [role="button"], input[type="submit"]'


def _class_list(element: Tag) -> list[str]:
    raw = element.get("class") or []
    if isinstance(raw, str):
        raw = raw.split()
    return [str(c).strip() for c in raw if str(c).strip()]


def infer_tone(hints: str) -> str | None:
    """Map class/style *hints* onto a tone using :data:`TONE_RULES`."""
    hints = hints.lower()
    for tone, keys in TONE_RULES:
        if any(key in hints for key in keys):
            return tone
    return None


def derive_section_theme(element: Tag) -> tuple[str | None, str | None]:
    """Return ``(tone, accent_color)`` for a container."""
    classes = " ".join(_class_list(element)).lower()
    style = str(element.get("style") or "").lower()
    tone = infer_tone(f"{classes} {style}")

    accent_color = None
    match = _BACKGROUND_RE.search(style) or _BORDER_RE.search(style)
    if match:
        accent_color = match.group(1).strip() or None
    elif element.get("data-color"):
        accent_color = str(element.get("data-color")).strip() or None
    return tone, accent_color


def has_call_to_action(element: Tag) -> bool:
    try:
        return element.select_one(_CTA_SELECTOR) is not None
    except Exception as exc:
        logger.debug("CTA selector failed: %s", exc)
        return False


def _first_heading_text(element: Tag, names: list[str]) -> str:
    found = element.find(names)
    if found and isinstance(found, Tag):
        return collapse_whitespace(found.get_text(separator=" "))
    return ""


def _collect_texts(element: Tag, name: str, limit: int, chars: int) -> list[str]:
    texts: list[str] = []
    for el in element.find_all(name):
        if len(texts) >= limit:
            break
        text = clean_paragraph_text(el.get_text(separator=" "))
        if text:
            texts.append(truncate_text(text, chars))
    return texts


def _section_links(element: Tag, base_url: str) -> list[LinkRef]:
    links: list[LinkRef] = []
    for anchor in element.find_all("a", href=True):
        link = link_from_anchor(anchor, base_url)
        if link:
            links.append(link)
    return dedupe_by_href(links)[: settings.SECTION_LINK_LIMIT]


def _section_images(element: Tag, base_url: str) -> list[ImageRef]:
    images: list[ImageRef] = []
    for img in element.find_all("img", src=True):
        image = image_from_tag(img, base_url)
        if image:
            images.append(image)
    return dedupe_by_href(images)[: settings.SECTION_IMAGE_LIMIT]


def build_section_block(element: Tag, index: int, base_url: str = "") -> SectionBlock | None:
    """Turn one container into a block; None when it has no usable content."""
    tag = (element.name or "section").lower()
    element_id = str(element.get("id") or "").strip()

    heading = _first_heading_text(element, ["h1", "h2"]) or _first_heading_text(
        element, ["h3", "h4"],
    )
    subheading = _first_heading_text(element, ["h5", "h6"])
    paragraphs = _collect_texts(
        element, "p", settings.SECTION_PARAGRAPH_LIMIT, settings.SECTION_PARAGRAPH_CHARS,
    )
    list_items = _collect_texts(
        element, "li", settings.SECTION_LIST_ITEM_LIMIT, settings.SECTION_LIST_ITEM_CHARS,
    )
    images = _section_images(element, base_url)

    if not (heading or paragraphs or list_items or images):
        return None

    tone, accent_color = derive_section_theme(element)
    return SectionBlock(
        id=element_id or f"{tag}-{index}",
        heading=heading or None,
        subheading=subheading or None,
        summary=paragraphs[0] if paragraphs else (list_items[0] if list_items else ""),
        paragraphs=paragraphs,
        list_items=list_items,
        links=_section_links(element, base_url),
        images=images,
        has_call_to_action=has_call_to_action(element),
        tag=tag,
        classes=_class_list(element)[: settings.SECTION_CLASS_LIMIT],
        body="\n\n".join([*paragraphs, *list_items]),
        tone=tone,
        accent_color=accent_color,
    )


def build_section_blocks(
    soup: BeautifulSoup,
    base_url: str = "",
    limit: int = settings.SECTION_LIMIT,
) -> list[SectionBlock]:
    """Extract up to *limit* section blocks in document order.

    Containers sharing an explicit ``id`` are only taken once.
    """
    sections: list[SectionBlock] = []
    seen: set[str] = set()

    for index, element in enumerate(soup.find_all(list(_CONTAINER_TAGS))):
        if not isinstance(element, Tag):
            continue
        block = build_section_block(element, index, base_url)
        if block is None:
            continue
        if block.id in seen:
            logger.debug("Skipping duplicate section id %r", block.id)
            continue
        seen.add(block.id)
        block.order = len(sections) + 1
        sections.append(block)
        if len(sections) >= limit:
            break

    return sections
