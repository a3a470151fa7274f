"""URL normalization and resolution utilities."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from pagedigest.errors import InvalidInput
from pagedigest.items import DomainInfo

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_PROTOCOL_RELATIVE_RE = re.compile(r"^//")
_EDGE_SLASHES_RE = re.compile(r"^/+|/+$")

# Loopback / local development hosts
_LOCAL_RE = re.compile(r"^(localhost|127\.0\.0\.1|0\.0\.0\.0|\[::1\])", re.IGNORECASE)

# Something that looks like a registrable domain: label chars, a dot, 2+ letter TLD
_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9]*\.[a-zA-Z]{2,}")


def normalize_url(url: object) -> str:
    """Turn a user-supplied string into a fetchable absolute URL.

    Rules, in order:
    - already ``http://`` / ``https://``: returned as-is (after trimming)
    - ``//host``: prefixed with ``https:``
    - localhost / loopback: prefixed with ``http://``
    - looks like a domain: prefixed with ``https://``
    - anything else: prefixed with ``https://``

    Whitespace and leading/trailing slashes are stripped first.

    Raises:
        InvalidInput: when *url* is empty, ``None``, or not a string.
    """
    if not url or not isinstance(url, str):
        raise InvalidInput("Invalid URL provided", value=url)

    trimmed = url.strip()
    normalized = _EDGE_SLASHES_RE.sub("", trimmed).strip()
    if not normalized:
        raise InvalidInput("Invalid URL provided", value=url)

    if _SCHEME_RE.match(normalized):
        return normalized

    # Protocol-relative: inherit https even for local hosts.
    if _PROTOCOL_RELATIVE_RE.match(trimmed):
        return f"https://{normalized}"

    if _LOCAL_RE.match(normalized):
        return f"http://{normalized}"

    if _DOMAIN_RE.match(normalized):
        return f"https://{normalized}"

    return f"https://{normalized}"


def is_fetchable_url(url: str) -> bool:
    """Return True if *url* parses to an http(s) URL with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def resolve_url(candidate: str | None, base_url: str = "") -> str:
    """Resolve *candidate* against *base_url*.

    Falls back to the original string when resolution fails.
    """
    if not candidate:
        return ""
    candidate = candidate.strip()
    if not base_url:
        return candidate
    try:
        return urljoin(base_url, candidate)
    except ValueError:
        return candidate


def extract_host(url: str) -> str | None:
    """Return the lowercased hostname of *url*, or None if it has none."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host or None


def domain_info(url: str) -> DomainInfo | None:
    """Describe the scheme/host/path of *url*; None when it cannot be parsed."""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname or ""
    except ValueError:
        return None
    if not parsed.netloc:
        return None
    return DomainInfo(
        domain=hostname,
        protocol=parsed.scheme,
        path=parsed.path or "/",
        host=parsed.netloc.lower(),
        origin=f"{parsed.scheme}://{parsed.netloc.lower()}",
    )
