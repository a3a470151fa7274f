"""Deterministic page-level metadata extraction from a parsed document.

Collects:
    <title> / description / keywords → flat headings h1–h6 →
    well-known <meta> tags, Open Graph, Twitter Card → JSON-LD blocks
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup, Tag

from pagedigest.extractors.text import collapse_whitespace
from pagedigest.items import Headings

logger = logging.getLogger(__name__)

_CHARSET_RE = re.compile(r"charset=([^;]+)", re.IGNORECASE)


def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and isinstance(tag, Tag):
        return _safe_str(tag.get("content")).strip()
    return ""


def _first(*values: Any) -> Any:
    """Return the first non-empty, non-None value."""
    for v in values:
        if v:
            return v
    return None


# ---------------------------------------------------------------------------
# Title / description / keywords
# ---------------------------------------------------------------------------

def extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""
    return title or _meta_content(soup, property="og:title")


def extract_description(soup: BeautifulSoup) -> str:
    return (
        _first(
            _meta_content(soup, name="description"),
            _meta_content(soup, property="og:description"),
        )
        or ""
    )


def extract_keywords(soup: BeautifulSoup) -> list[str]:
    raw = _meta_content(soup, name="keywords")
    return [k.strip() for k in raw.split(",") if k.strip()]


def extract_headings(soup: BeautifulSoup) -> Headings:
    """Flat h1–h6 text lists in document order; empty headings are dropped."""
    buckets: dict[str, list[str]] = {f"h{level}": [] for level in range(1, 7)}
    for el in soup.find_all(list(buckets)):
        if not isinstance(el, Tag):
            continue
        text = collapse_whitespace(el.get_text(separator=" "))
        if text:
            buckets[el.name].append(text)
    return Headings(**buckets)


# ---------------------------------------------------------------------------
# Meta tags
# ---------------------------------------------------------------------------

def _extract_charset(soup: BeautifulSoup) -> str:
    tag = soup.find("meta", charset=True)
    if tag and isinstance(tag, Tag):
        charset = _safe_str(tag.get("charset")).strip()
        if charset:
            return charset
    for tag in soup.find_all("meta", attrs={"http-equiv": True}):
        if _safe_str(tag.get("http-equiv")).lower() != "content-type":
            continue
        m = _CHARSET_RE.search(_safe_str(tag.get("content")))
        if m:
            return m.group(1).strip()
    return ""


def _extract_canonical(soup: BeautifulSoup) -> str:
    # rel is a multi-valued list in BS4
    for link in soup.find_all("link"):
        if not isinstance(link, Tag):
            continue
        rel_val = link.get("rel")
        rels = rel_val if isinstance(rel_val, list) else _safe_str(rel_val).split()
        if "canonical" in [r.lower() for r in rels]:
            href = _safe_str(link.get("href")).strip()
            if href:
                return href
    return ""


def _extract_og_twitter(soup: BeautifulSoup) -> dict[str, str]:
    found: dict[str, str] = {}
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        prop = _safe_str(tag.get("property") or tag.get("name")).strip()
        content = _safe_str(tag.get("content")).strip()
        if not prop or not content:
            continue
        if prop.lower().startswith(("og:", "twitter:")):
            found[prop] = content
    return found


def extract_metadata(soup: BeautifulSoup) -> dict[str, str]:
    """Collect well-known meta values plus every ``og:*`` / ``twitter:*`` property.

    Keys: language, charset, viewport, canonical, robots, og:*, twitter:*,
    author, generator, themeColor.  Absent values are omitted, never empty.
    """
    metadata: dict[str, str] = {}

    html_tag = soup.find("html")
    if html_tag and isinstance(html_tag, Tag):
        lang = _safe_str(html_tag.get("lang") or html_tag.get("xml:lang")).strip()
        if lang:
            metadata["language"] = lang

    simple: tuple[tuple[str, str], ...] = (
        ("charset", _extract_charset(soup)),
        ("viewport", _meta_content(soup, name="viewport")),
        ("canonical", _extract_canonical(soup)),
        ("robots", _meta_content(soup, name="robots")),
    )
    for key, value in simple:
        if value:
            metadata[key] = value

    metadata.update(_extract_og_twitter(soup))

    author = _first(
        _meta_content(soup, name="author"),
        _meta_content(soup, property="article:author"),
    )
    if author:
        metadata["author"] = author

    generator = _meta_content(soup, name="generator")
    if generator:
        metadata["generator"] = generator

    theme_color = _meta_content(soup, name="theme-color")
    if theme_color:
        metadata["themeColor"] = theme_color

    return metadata


# ---------------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------------

def extract_structured_data(soup: BeautifulSoup) -> list[Any]:
    """Parse every ``application/ld+json`` block independently.

    A malformed block is logged and skipped; it never stops later blocks.
    """
    structured: list[Any] = []
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string if script.string is not None else script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            structured.append(json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.warning("Failed to parse JSON-LD block: %s", exc)
            continue
    return structured
