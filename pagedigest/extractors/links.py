"""Link, image and navigation collectors."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from bs4 import BeautifulSoup, Tag

from pagedigest import settings
from pagedigest.extractors.text import collapse_whitespace, truncate_text
from pagedigest.extractors.urlnorm import resolve_url
from pagedigest.items import ImageRef, LinkRef, NavLink

logger = logging.getLogger(__name__)

_RefT = TypeVar("_RefT", LinkRef, ImageRef, NavLink)

# (selector, area) in priority order
_NAVIGATION_AREAS: tuple[tuple[str, str], ...] = (
    ("nav a[href]", "navigation"),
    ("header a[href]", "header"),
    ("footer a[href]", "footer"),
)


def _safe_str(val: object, default: str = "") -> str:
    """Convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _ref_key(item: LinkRef | ImageRef) -> str:
    if isinstance(item, ImageRef):
        return item.src
    return item.href


def dedupe_by_href(items: Iterable[_RefT]) -> list[_RefT]:
    """Drop entries whose resolved href/src was already seen (or is empty).

    The first occurrence wins and first-seen order is preserved.
    """
    seen: set[str] = set()
    unique: list[_RefT] = []
    for item in items:
        key = _ref_key(item)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def link_from_anchor(
    anchor: Tag,
    base_url: str,
    text_limit: int = settings.LINK_TEXT_CHARS,
) -> LinkRef | None:
    href = _safe_str(anchor.get("href")).strip()
    if not href:
        return None
    resolved = resolve_url(href, base_url)
    text = collapse_whitespace(anchor.get_text(separator=" ")) or href
    return LinkRef(text=truncate_text(text, text_limit), href=resolved)


def image_from_tag(
    img: Tag,
    base_url: str,
    alt_limit: int = settings.IMAGE_ALT_CHARS,
) -> ImageRef | None:
    src = _safe_str(img.get("src")).strip()
    if not src:
        return None
    alt = _safe_str(img.get("alt")).strip()
    return ImageRef(src=resolve_url(src, base_url), alt=truncate_text(alt, alt_limit))


def scoped_links(node: Tag, base_url: str) -> list[LinkRef]:
    """Anchors at or below *node*, in document order (not deduplicated)."""
    anchors = [node] if node.name == "a" and node.get("href") else node.find_all("a", href=True)
    links: list[LinkRef] = []
    for anchor in anchors:
        if isinstance(anchor, Tag):
            link = link_from_anchor(anchor, base_url)
            if link:
                links.append(link)
    return links


def scoped_images(node: Tag, base_url: str) -> list[ImageRef]:
    """Images at or below *node*, in document order (not deduplicated)."""
    tags = [node] if node.name == "img" and node.get("src") else node.find_all("img", src=True)
    images: list[ImageRef] = []
    for img in tags:
        if isinstance(img, Tag):
            image = image_from_tag(img, base_url)
            if image:
                images.append(image)
    return images


# ---------------------------------------------------------------------------
# Page-level collectors
# ---------------------------------------------------------------------------

def extract_links(
    soup: BeautifulSoup,
    base_url: str = "",
    limit: int = settings.RAW_LINK_LIMIT,
) -> list[LinkRef]:
    """All ``<a href>`` links of the page, resolved and deduplicated."""
    links: list[LinkRef] = []
    for anchor in soup.find_all("a", href=True):
        if not isinstance(anchor, Tag):
            continue
        href = _safe_str(anchor.get("href")).strip()
        if not href:
            continue
        text = collapse_whitespace(anchor.get_text(separator=" ")) or href
        links.append(LinkRef(text=text, href=resolve_url(href, base_url)))
    return dedupe_by_href(links)[:limit]


def extract_images(
    soup: BeautifulSoup,
    base_url: str = "",
    limit: int = settings.RAW_IMAGE_LIMIT,
) -> list[ImageRef]:
    """All ``<img src>`` images of the page, resolved and deduplicated."""
    images: list[ImageRef] = []
    for img in soup.find_all("img", src=True):
        if not isinstance(img, Tag):
            continue
        src = _safe_str(img.get("src")).strip()
        if not src:
            continue
        alt = _safe_str(img.get("alt")).strip()
        images.append(ImageRef(src=resolve_url(src, base_url), alt=alt))
    return dedupe_by_href(images)[:limit]


def extract_navigation_links(
    soup: BeautifulSoup,
    base_url: str = "",
    limit: int = settings.NAVIGATION_LIMIT,
) -> list[NavLink]:
    """Links found in ``<nav>``, ``<header>`` and ``<footer>`` chrome."""
    links: list[NavLink] = []
    for selector, area in _NAVIGATION_AREAS:
        try:
            anchors = soup.select(selector)
        except Exception as exc:
            logger.debug("CSS selector %r failed: %s", selector, exc)
            continue
        for anchor in anchors:
            href = _safe_str(anchor.get("href")).strip()
            if not href:
                continue
            resolved = resolve_url(href, base_url)
            text = collapse_whitespace(anchor.get_text(separator=" ")) or resolved
            links.append(
                NavLink(
                    text=truncate_text(text, settings.NAVIGATION_TEXT_LIMIT),
                    href=resolved,
                    area=area,
                ),
            )
    return dedupe_by_href(links)[:limit]
