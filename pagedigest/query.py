"""pagedigest.query - single-URL fetch and extraction API.

Uses only the stdlib (``urllib``) for HTTP.  The fetch is the only I/O; once
the document is parsed, extraction is synchronous and bounded.

Basic usage::

    from pagedigest.query import scrape
    from pagedigest.refine import refine_scraped_data

    result = scrape("example.com")
    if result.success:
        doc = refine_scraped_data(result.data)
        print(doc.title, len(doc.content_sections))
    else:
        print(result.error)

Low-level access::

    from pagedigest.query import fetch_html, parse

    html = fetch_html("https://example.com/")
    raw = parse(html, url="https://example.com/")
"""

from __future__ import annotations

import gzip
import http.client
import logging
import socket
import urllib.error
import urllib.request
import zlib
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from bs4 import BeautifulSoup

from pagedigest import settings
from pagedigest.errors import ExtractionFailed, InvalidInput, PageDigestError, ParseFailed
from pagedigest.extractors.links import (
    extract_images,
    extract_links,
    extract_navigation_links,
)
from pagedigest.extractors.metadata import (
    extract_description,
    extract_headings,
    extract_keywords,
    extract_metadata,
    extract_structured_data,
    extract_title,
)
from pagedigest.extractors.outline import build_content_outline
from pagedigest.extractors.sections import build_section_blocks
from pagedigest.extractors.stats import compute_stats
from pagedigest.extractors.text import extract_main_text, sanitize_plain_text
from pagedigest.extractors.urlnorm import domain_info, is_fetchable_url, normalize_url
from pagedigest.items import Headings, RawExtraction, ScrapeResult

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

CONNECTION_REFUSED = "Connection refused. The website may be down or unreachable."
TIMED_OUT = "Request timed out. The website took too long to respond."
DOMAIN_NOT_FOUND = "Domain not found. Please check the URL."
EMPTY_RESPONSE = "Empty response received from the website"

# Codes HTTPRedirectHandler follows; other 3xx responses are plain HTTP errors
_REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})


# ---------------------------------------------------------------------------
# Fetch collaborator
# ---------------------------------------------------------------------------

class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler that gives up after *max_redirects* hops."""

    def __init__(self, max_redirects: int) -> None:
        super().__init__()
        self.max_redirections = max_redirects


def _build_opener(max_redirects: int) -> urllib.request.OpenerDirector:
    return urllib.request.build_opener(_LimitedRedirectHandler(max_redirects))


def _decode_response_body(raw: bytes, headers: Any, url: str) -> str:
    encoding = ""
    if headers is not None:
        try:
            encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        except Exception:
            encoding = ""

    try:
        if encoding == "gzip":
            raw = gzip.decompress(raw)
        elif encoding in ("deflate", "zlib"):
            raw = zlib.decompress(raw)
    except (OSError, zlib.error) as exc:
        raise ExtractionFailed(
            f"Could not decompress {encoding} response: {exc}", kind="network", url=url,
        ) from exc

    charset = "utf-8"
    if headers is not None:
        try:
            charset = headers.get_content_charset("utf-8") or "utf-8"
        except Exception:
            charset = "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except (LookupError, ValueError):
        return raw.decode("utf-8", errors="replace")


def _is_redirect_overflow(exc: urllib.error.HTTPError) -> bool:
    return exc.code in _REDIRECT_CODES and str(exc.reason).startswith(
        urllib.request.HTTPRedirectHandler.inf_msg,
    )


def _is_timeout(reason: object) -> bool:
    return isinstance(reason, (TimeoutError, socket.timeout))


def _map_url_error(exc: urllib.error.URLError, url: str) -> ExtractionFailed:
    reason = exc.reason
    if isinstance(reason, ConnectionRefusedError):
        return ExtractionFailed(CONNECTION_REFUSED, kind="connection_refused", url=url)
    if _is_timeout(reason):
        return ExtractionFailed(TIMED_OUT, kind="timeout", url=url)
    if isinstance(reason, socket.gaierror):
        return ExtractionFailed(DOMAIN_NOT_FOUND, kind="domain_not_found", url=url)
    return ExtractionFailed(f"URL error fetching {url}: {reason}", kind="network", url=url)


def fetch_html(
    url: str,
    *,
    timeout: float = settings.DOWNLOAD_TIMEOUT,
    max_redirects: int = settings.MAX_REDIRECTS,
    user_agent: str | None = None,
) -> str:
    """Fetch *url* and return the response body as a decoded string.

    No retries are attempted; retry policy belongs to the caller.

    Args:
        url:           Normalized HTTP/HTTPS URL.
        timeout:       Socket timeout in seconds (default 30).
        max_redirects: Maximum redirects to follow (default 5).
        user_agent:    Override the default browser User-Agent string.

    Raises:
        ExtractionFailed: On HTTP errors, connection failures, timeouts,
            unknown domains, URLs urllib refuses to send, truncated or
            empty bodies.
    """
    if not is_fetchable_url(url):
        raise ExtractionFailed(f"Unsupported URL: {url!r}", kind="network", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or settings.USER_AGENT,
            "Accept": settings.ACCEPT,
            "Accept-Language": settings.ACCEPT_LANGUAGE,
            "Accept-Encoding": "gzip, deflate",
        },
    )
    opener = _build_opener(max_redirects)

    try:
        with opener.open(req, timeout=timeout) as resp:
            body = _decode_response_body(resp.read(), resp.headers, url)
    except urllib.error.HTTPError as exc:
        if _is_redirect_overflow(exc):
            raise ExtractionFailed(
                f"Too many redirects (more than {max_redirects}) fetching {url}",
                kind="too_many_redirects",
                url=url,
                status=exc.code,
            ) from exc
        raise ExtractionFailed(
            f"HTTP {exc.code}: {exc.reason}", kind="http_error", url=url, status=exc.code,
        ) from exc
    except urllib.error.URLError as exc:
        raise _map_url_error(exc, url) from exc
    except (TimeoutError, socket.timeout) as exc:
        raise ExtractionFailed(TIMED_OUT, kind="timeout", url=url) from exc
    except ConnectionRefusedError as exc:
        raise ExtractionFailed(CONNECTION_REFUSED, kind="connection_refused", url=url) from exc
    except OSError as exc:
        raise ExtractionFailed(
            f"Network error fetching {url}: {exc}", kind="network", url=url,
        ) from exc
    except (ValueError, http.client.HTTPException) as exc:
        # Malformed request URLs and broken responses (InvalidURL, IncompleteRead)
        raise ExtractionFailed(
            f"Network error fetching {url}: {exc}", kind="network", url=url,
        ) from exc

    if not body or not body.strip():
        raise ExtractionFailed(EMPTY_RESPONSE, kind="empty_response", url=url)
    return body


# ---------------------------------------------------------------------------
# Parse collaborator
# ---------------------------------------------------------------------------

def parse_html(html: str | bytes, url: str = "") -> BeautifulSoup:
    """Parse *html* into a queryable tree.

    Raises:
        ParseFailed: when *html* is not markup or the parser gives up.
    """
    if not isinstance(html, (str, bytes)):
        raise ParseFailed(f"Expected markup text, got {type(html).__name__}", url=url)
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as exc:
        raise ParseFailed(f"Failed to parse website HTML: {exc}", url=url) from exc


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _collect(what: str, url: str, default: _T, fn: Callable[[], _T]) -> _T:
    try:
        return fn()
    except Exception as exc:
        logger.warning("%s extraction failed for %s: %s", what, url, exc)
        return default


def extract(soup: BeautifulSoup, *, url: str = "") -> RawExtraction:
    """Run every collector over a parsed document and return the raw result.

    Collectors are independent: one failing yields an empty field, never an
    aborted extraction.  No network requests are made.
    """
    title = _collect("title", url, "", lambda: extract_title(soup))
    description = _collect("description", url, "", lambda: extract_description(soup))
    keywords = _collect("keywords", url, [], lambda: extract_keywords(soup))
    metadata = _collect("metadata", url, {}, lambda: extract_metadata(soup))
    headings = _collect("headings", url, Headings(), lambda: extract_headings(soup))
    links = _collect("links", url, [], lambda: extract_links(soup, url))
    images = _collect("images", url, [], lambda: extract_images(soup, url))
    navigation = _collect("navigation", url, [], lambda: extract_navigation_links(soup, url))
    outline = _collect("outline", url, [], lambda: build_content_outline(soup, url))
    sections = _collect("sections", url, [], lambda: build_section_blocks(soup, url))
    text = _collect("text", url, "", lambda: sanitize_plain_text(extract_main_text(soup)))
    structured = _collect("structured data", url, [], lambda: extract_structured_data(soup))

    stats = compute_stats(
        title=title,
        description=description,
        keywords=keywords,
        metadata=metadata,
        headings=headings,
        links=links,
        images=images,
        text=text,
        structured_data=structured,
        sections=sections,
        navigation=navigation,
        paragraph_count=len(soup.find_all("p")),
        list_count=len(soup.find_all(["ul", "ol"])),
    )

    return RawExtraction(
        url=url,
        domain_info=domain_info(url) if url else None,
        title=title,
        description=description,
        keywords=keywords,
        headings=headings,
        links=links,
        images=images,
        text=text,
        metadata=metadata,
        structured_data=structured,
        stats=stats,
        navigation=navigation,
        content_outline=outline,
        content_sections=sections,
        scraped_at=datetime.now(UTC).isoformat(),
    )


def parse(html: str | bytes, url: str = "") -> RawExtraction:
    """Parse pre-fetched HTML with no network requests.

    Raises:
        ParseFailed: when the markup cannot be parsed.
    """
    return extract(parse_html(html, url=url), url=url)


# ---------------------------------------------------------------------------
# Main public API
# ---------------------------------------------------------------------------

def _failure(exc: PageDigestError) -> ScrapeResult:
    return ScrapeResult(
        success=False,
        error=str(exc),
        error_type=type(exc).__name__,
        retryable=exc.retryable,
    )


def scrape(
    url: object,
    *,
    timeout: float = settings.DOWNLOAD_TIMEOUT,
    max_redirects: int = settings.MAX_REDIRECTS,
    user_agent: str | None = None,
) -> ScrapeResult:
    """Normalize, fetch, parse and extract a single page.

    Never raises for the documented failures: invalid input, fetch errors and
    parse errors come back as ``ScrapeResult(success=False, error=...)``.
    """
    try:
        normalized = normalize_url(url)
    except InvalidInput as exc:
        logger.debug("Rejected URL input %r", url)
        return _failure(exc)

    if not is_fetchable_url(normalized):
        return _failure(InvalidInput("Invalid URL format", value=url))

    logger.info("Scraping %s", normalized)
    try:
        html = fetch_html(
            normalized,
            timeout=timeout,
            max_redirects=max_redirects,
            user_agent=user_agent,
        )
        raw = parse(html, url=normalized)
    except ExtractionFailed as exc:
        logger.warning("Fetch failed for %s: %s", normalized, exc.reason)
        return _failure(exc)
    except ParseFailed as exc:
        logger.warning("Parse failed for %s: %s", normalized, exc)
        return _failure(exc)

    logger.info(
        "Scraped %s: %d outline root(s), %d section(s), %d link(s)",
        normalized,
        len(raw.content_outline),
        len(raw.content_sections),
        len(raw.links),
    )
    return ScrapeResult(success=True, data=raw)
