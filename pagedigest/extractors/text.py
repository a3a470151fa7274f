"""Text sanitizing, truncation and main-text extraction."""

from __future__ import annotations

import copy
import logging
import re

from bs4 import BeautifulSoup

from pagedigest import settings

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_HTTP_URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
_WWW_URL_RE = re.compile(r"www\.\S+", re.IGNORECASE)
# Stray embed-widget leakage ("<iframe>" rendered as text by broken markup)
_NOISE_TOKEN_RE = re.compile(r"\biframe\b", re.IGNORECASE)
_ALL_NON_WORD_RE = re.compile(r"^\W+$")

ELLIPSIS = "..."

# Page chrome excluded from the main text
_CHROME_TAGS: tuple[str, ...] = ("script", "style", "nav", "footer", "header", "aside")


def collapse_whitespace(raw: str | None) -> str:
    """Collapse every whitespace run to one space and trim."""
    if not raw:
        return ""
    return _WHITESPACE_RE.sub(" ", raw).strip()


def clean_paragraph_text(raw: str | None) -> str:
    """Sanitize a paragraph/list-item string.

    Collapses whitespace, drops absolute URLs and the ``iframe`` noise token,
    and returns an empty string when nothing word-like remains.
    """
    if not raw or not isinstance(raw, str):
        return ""
    text = collapse_whitespace(raw)
    if not text:
        return ""
    text = _HTTP_URL_RE.sub("", text)
    text = _WWW_URL_RE.sub("", text)
    text = _NOISE_TOKEN_RE.sub("", text)
    text = collapse_whitespace(text)
    if _ALL_NON_WORD_RE.match(text):
        return ""
    return text


def sanitize_plain_text(raw: str | None) -> str:
    """Sanitize a long body of text (same filters, no non-word dropping)."""
    if not raw or not isinstance(raw, str):
        return ""
    text = _HTTP_URL_RE.sub("", raw)
    text = _WWW_URL_RE.sub("", text)
    text = _NOISE_TOKEN_RE.sub("", text)
    return collapse_whitespace(text)


def truncate_text(value: str | None, limit: int = 600) -> str:
    """Return *value* unchanged if it fits in *limit*, else cut it and add ``...``."""
    if not value or not isinstance(value, str):
        return ""
    if len(value) <= limit:
        return value.strip()
    return f"{value[:limit].strip()}{ELLIPSIS}"


def count_words(text: str | None) -> int:
    if not text:
        return 0
    return len(text.split())


def extract_main_text(soup: BeautifulSoup, limit: int = settings.MAIN_TEXT_LIMIT) -> str:
    """Return the visible document text without page chrome.

    The tree passed in is not modified; chrome is stripped from a copy.
    """
    try:
        clone = copy.copy(soup)
    except Exception as exc:  # bs4 copy failures on exotic trees
        logger.debug("Could not copy document for main text: %s", exc)
        return ""
    for el in clone.find_all(list(_CHROME_TAGS)):
        el.decompose()
    text = collapse_whitespace(clone.get_text(separator=" "))
    return text[:limit]
