"""pagedigest.parser - High-level PageDigest class.

Provides a stateful entry point that bundles fetch configuration with the
scrape → refine → compare workflow.

Usage::

    from pagedigest import PageDigest

    digest = PageDigest(timeout=15)
    result, doc = digest.scrape_refined("example.com")
    if doc is not None:
        print(doc.title, doc.stats.word_count)

    # Parse pre-fetched HTML (no network)
    raw = digest.parse("<html><body><h1>Hi</h1></body></html>",
                       url="https://example.com")

    # Re-scrape a stored document and list what changed
    _, fresh, changes = digest.rescrape(stored_document)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pagedigest import settings
from pagedigest.diff import ChangeSummary, compare_documents
from pagedigest.items import RawExtraction, RefinedDocument, ScrapeResult
from pagedigest.query import parse as _parse
from pagedigest.query import scrape as _scrape
from pagedigest.refine import refine_scraped_data


class PageDigest:
    """Scraper with fixed fetch settings.

    All parameters are optional; ``PageDigest()`` behaves exactly like
    calling :func:`pagedigest.query.scrape` directly.

    Args:
        timeout:       Per-request network timeout in seconds (default 30).
        max_redirects: Maximum redirects followed per fetch (default 5).
        user_agent:    User-Agent header sent with every fetch.
    """

    def __init__(
        self,
        timeout: float = settings.DOWNLOAD_TIMEOUT,
        max_redirects: int = settings.MAX_REDIRECTS,
        user_agent: str | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._user_agent = user_agent

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def scrape(self, url: str, **kwargs: Any) -> ScrapeResult:
        """Scrape *url* with this instance's fetch settings.

        Keyword arguments override the constructor values for this call.
        """
        kwargs.setdefault("timeout", self._timeout)
        kwargs.setdefault("max_redirects", self._max_redirects)
        kwargs.setdefault("user_agent", self._user_agent)
        return _scrape(url, **kwargs)

    def parse(self, html: str, url: str = "") -> RawExtraction:
        """Extract from pre-fetched HTML (no network calls)."""
        return _parse(html, url=url)

    def refine(self, raw: RawExtraction | Mapping[str, Any]) -> RefinedDocument:
        return refine_scraped_data(raw)

    def scrape_refined(
        self, url: str, **kwargs: Any,
    ) -> tuple[ScrapeResult, RefinedDocument | None]:
        """Scrape *url* and refine it; the document is None when the scrape failed."""
        result = self.scrape(url, **kwargs)
        if not result.success or result.data is None:
            return result, None
        return result, refine_scraped_data(result.data)

    def rescrape(
        self,
        stored: RefinedDocument | Mapping[str, Any],
        **kwargs: Any,
    ) -> tuple[ScrapeResult, RefinedDocument | None, ChangeSummary]:
        """Scrape the URL of a stored document again and compare the two.

        Returns:
            ``(result, fresh_document, changes)``; when the scrape fails the
            document is None and *changes* reports that no comparison was made.
        """
        previous = (
            stored if isinstance(stored, RefinedDocument)
            else RefinedDocument.model_validate(stored)
        )
        result, fresh = self.scrape_refined(previous.url, **kwargs)
        return result, fresh, compare_documents(previous, fresh)
