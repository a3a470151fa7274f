"""Aggregate statistics over a page's extracted parts."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pagedigest import settings
from pagedigest.extractors.text import count_words
from pagedigest.extractors.urlnorm import extract_host
from pagedigest.items import ExtractionStats, Headings, ImageRef, LinkRef, NavLink, SectionBlock


def reading_time(word_count: int, words_per_minute: int = settings.WORDS_PER_MINUTE) -> int:
    """Estimated reading time in whole minutes, never below one.

    Halves round up (``300 words → 2``).
    """
    return max(1, int(word_count / words_per_minute + 0.5))


def unique_link_hosts(links: Iterable[LinkRef]) -> int:
    """Count distinct hostnames among *links*; unparseable hrefs are skipped."""
    hosts: set[str] = set()
    for link in links:
        if not link.href:
            continue
        host = extract_host(link.href)
        if host:
            hosts.add(host)
    return len(hosts)


def compute_stats(
    *,
    title: str,
    description: str,
    keywords: list[str],
    metadata: dict[str, str],
    headings: Headings,
    links: list[LinkRef],
    images: list[ImageRef],
    text: str,
    structured_data: list[Any],
    sections: list[SectionBlock],
    navigation: list[NavLink],
    paragraph_count: int = 0,
    list_count: int = 0,
) -> ExtractionStats:
    word_count = count_words(text)
    return ExtractionStats(
        total_headings=headings.total(),
        total_links=len(links),
        total_images=len(images),
        total_keywords=len(keywords),
        text_length=len(text),
        has_title=bool(title),
        has_description=bool(description),
        has_keywords=bool(keywords),
        has_open_graph=any(key.startswith("og:") for key in metadata),
        has_twitter_card=any(key.startswith("twitter:") for key in metadata),
        has_structured_data=bool(structured_data),
        has_canonical=bool(metadata.get("canonical")),
        has_robots=bool(metadata.get("robots")),
        has_language=bool(metadata.get("language")),
        has_charset=bool(metadata.get("charset")),
        has_viewport=bool(metadata.get("viewport")),
        section_count=len(sections),
        paragraph_count=paragraph_count,
        list_count=list_count,
        nav_link_count=len(navigation),
        word_count=word_count,
        reading_time_minutes=reading_time(word_count),
        unique_link_hosts=unique_link_hosts(links),
    )
