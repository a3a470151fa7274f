"""Exception taxonomy for pagedigest.

Only a failure to obtain or parse the document is a hard error.  Everything
else (bad JSON-LD, unresolvable links, empty containers) degrades silently.
"""

from __future__ import annotations


class PageDigestError(RuntimeError):
    """Base class for every error raised by pagedigest.

    Attributes:
        retryable -- whether repeating the same call may succeed
    """

    retryable: bool = False


class InvalidInput(PageDigestError, ValueError):
    """Raised when a URL value is empty, ``None``, or not a string."""

    def __init__(self, message: str = "Invalid URL provided", value: object = None) -> None:
        super().__init__(message)
        self.value = value


class ExtractionFailed(PageDigestError):
    """Raised when the page could not be fetched.

    Attributes:
        reason -- human-readable description shown to callers
        kind   -- "connection_refused" | "timeout" | "domain_not_found" |
                  "http_error" | "too_many_redirects" | "empty_response" |
                  "network"
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(
        self,
        reason: str,
        *,
        kind: str = "network",
        url: str = "",
        status: int = 0,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.kind = kind
        self.url = url
        self.status = status

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        if self.kind == "too_many_redirects":
            return False
        # 4xx is final except 408 and 429.
        if self.kind == "http_error" and 400 <= self.status < 500:
            return self.status in (408, 429)
        return True


class ParseFailed(PageDigestError):
    """Raised when markup cannot be turned into a document tree."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url
