"""Tests for pagedigest.query - fetch, parse and the scrape entry point."""

from __future__ import annotations

import gzip
import http.client
import logging
import socket
import urllib.error
import urllib.request
from unittest.mock import MagicMock, patch

import pytest

from pagedigest.errors import ExtractionFailed, ParseFailed
from pagedigest.items import RawExtraction
from pagedigest.query import (
    CONNECTION_REFUSED,
    DOMAIN_NOT_FOUND,
    EMPTY_RESPONSE,
    TIMED_OUT,
    fetch_html,
    parse,
    parse_html,
    scrape,
)

URL = "https://acme.example/"


def _make_mock_response(body: bytes, encoding: str = "", charset: str = "utf-8") -> MagicMock:
    resp = MagicMock()
    resp.read.return_value = body
    resp.headers.get.return_value = encoding
    resp.headers.get_content_charset.return_value = charset
    resp.__enter__ = lambda s: s
    resp.__exit__ = MagicMock(return_value=False)
    return resp


def _patch_opener(*, response: MagicMock | None = None, error: Exception | None = None):
    opener = MagicMock()
    if error is not None:
        opener.open.side_effect = error
    else:
        opener.open.return_value = response
    return patch("pagedigest.query._build_opener", return_value=opener)


# ---------------------------------------------------------------------------
# fetch_html() - HTTP fetch (mocked)
# ---------------------------------------------------------------------------

class TestFetchHtml:
    def test_returns_string(self):
        resp = _make_mock_response(b"<html><body><p>Hello world</p></body></html>")
        with _patch_opener(response=resp):
            result = fetch_html(URL)
        assert "Hello world" in result

    def test_gzip_body_decoded(self):
        resp = _make_mock_response(gzip.compress(b"<p>zipped</p>"), encoding="gzip")
        with _patch_opener(response=resp):
            assert fetch_html(URL) == "<p>zipped</p>"

    def test_sends_headers_and_timeout(self):
        resp = _make_mock_response(b"<p>x</p>")
        with _patch_opener(response=resp) as build:
            fetch_html(URL, timeout=7, max_redirects=2, user_agent="TestAgent/1.0")
        build.assert_called_once_with(2)
        opener = build.return_value
        request = opener.open.call_args.args[0]
        assert request.get_header("User-agent") == "TestAgent/1.0"
        assert opener.open.call_args.kwargs["timeout"] == 7

    def test_empty_body(self):
        with _patch_opener(response=_make_mock_response(b"   ")), \
             pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert str(exc_info.value) == EMPTY_RESPONSE
        assert exc_info.value.kind == "empty_response"

    def test_http_error(self):
        error = urllib.error.HTTPError(URL, 404, "Not Found", {}, None)
        with _patch_opener(error=error), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert str(exc_info.value) == "HTTP 404: Not Found"
        assert exc_info.value.status == 404
        assert exc_info.value.url == URL
        assert exc_info.value.retryable is False

    def test_server_error_retryable(self):
        error = urllib.error.HTTPError(URL, 503, "Service Unavailable", {}, None)
        with _patch_opener(error=error), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert exc_info.value.retryable is True

    def test_redirect_limit(self):
        error = urllib.error.HTTPError(
            URL, 302, urllib.request.HTTPRedirectHandler.inf_msg + "Found", {}, None,
        )
        with _patch_opener(error=error), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL, max_redirects=3)
        assert exc_info.value.kind == "too_many_redirects"
        assert exc_info.value.retryable is False
        assert "3" in str(exc_info.value)

    @pytest.mark.parametrize(("status", "reason"), [
        (300, "Multiple Choices"), (304, "Not Modified"), (302, "Found"),
    ])
    def test_unfollowed_3xx_is_http_error(self, status, reason):
        error = urllib.error.HTTPError(URL, status, reason, {}, None)
        with _patch_opener(error=error), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert exc_info.value.kind == "http_error"
        assert str(exc_info.value) == f"HTTP {status}: {reason}"
        assert exc_info.value.status == status

    def test_invalid_request_url(self):
        error = http.client.InvalidURL("URL can't contain control characters.")
        with _patch_opener(error=error), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html("https://acme.example/hello world")
        assert exc_info.value.kind == "network"

    def test_truncated_body(self):
        resp = _make_mock_response(b"")
        resp.read.side_effect = http.client.IncompleteRead(b"<p>part", 100)
        with _patch_opener(response=resp), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert exc_info.value.kind == "network"

    @pytest.mark.parametrize(
        ("reason", "message", "kind"),
        [
            (ConnectionRefusedError(), CONNECTION_REFUSED, "connection_refused"),
            (socket.timeout("timed out"), TIMED_OUT, "timeout"),
            (
                socket.gaierror(-2, "Name or service not known"),
                DOMAIN_NOT_FOUND,
                "domain_not_found",
            ),
        ],
    )
    def test_url_error_mapping(self, reason, message, kind):
        with _patch_opener(error=urllib.error.URLError(reason)), \
             pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert str(exc_info.value) == message
        assert exc_info.value.kind == kind

    def test_other_url_error(self):
        with _patch_opener(error=urllib.error.URLError("boom")), \
             pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert exc_info.value.kind == "network"

    def test_bare_timeout(self):
        with _patch_opener(error=TimeoutError()), pytest.raises(ExtractionFailed) as exc_info:
            fetch_html(URL)
        assert exc_info.value.kind == "timeout"

    def test_invalid_scheme(self):
        with pytest.raises(ExtractionFailed):
            fetch_html("ftp://acme.example/file.txt")


# ---------------------------------------------------------------------------
# parse_html() / parse() - no network
# ---------------------------------------------------------------------------

class TestParse:
    def test_non_markup_rejected(self):
        with pytest.raises(ParseFailed):
            parse_html(42)  # type: ignore[arg-type]

    def test_returns_raw_extraction(self, landing_html):
        raw = parse(landing_html, url=URL)
        assert isinstance(raw, RawExtraction)
        assert raw.url == URL
        assert raw.title == "Acme Studio | Design and Development"
        assert raw.scraped_at

    def test_landing_stats(self, landing_html):
        stats = parse(landing_html, url=URL).stats
        assert stats.total_links == 8
        assert stats.total_images == 2
        assert stats.unique_link_hosts == 2
        assert stats.section_count == 3
        assert stats.nav_link_count == 6
        assert stats.paragraph_count == 8
        assert stats.list_count == 2
        assert stats.total_headings == 7
        assert stats.has_open_graph
        assert stats.has_twitter_card
        assert stats.has_structured_data
        assert stats.reading_time_minutes == 1

    def test_text_is_sanitized(self, landing_html):
        text = parse(landing_html, url=URL).text
        assert "https://acme.example/about" not in text
        assert "Build faster websites" in text

    def test_empty_document_degrades(self):
        raw = parse("", url=URL)
        assert raw.content_outline == []
        assert raw.content_sections == []
        assert raw.stats.word_count == 0

    def test_failing_collector_degrades(self, landing_html, caplog):
        with patch("pagedigest.query.extract_links", side_effect=RuntimeError("boom")), \
             caplog.at_level(logging.WARNING, logger="pagedigest.query"):
            raw = parse(landing_html, url=URL)
        assert raw.links == []
        assert raw.title != ""
        assert "links extraction failed" in caplog.text

    def test_json_shape_is_camel_case(self, landing_html):
        payload = parse(landing_html, url=URL).to_json_dict()
        assert "contentOutline" in payload
        assert "subSections" in payload["contentOutline"][0]
        assert "hasCallToAction" in payload["contentSections"][0]


# ---------------------------------------------------------------------------
# scrape() - never raises for documented failures
# ---------------------------------------------------------------------------

class TestScrape:
    def test_success(self, landing_html):
        with patch("pagedigest.query.fetch_html", return_value=landing_html) as fetch:
            result = scrape("acme.example")
        assert result.success is True
        assert result.error is None
        assert result.data is not None
        assert result.data.url == "https://acme.example"
        assert fetch.call_args.args[0] == "https://acme.example"

    @pytest.mark.parametrize("value", [None, "", "   ", 7])
    def test_invalid_input(self, value):
        result = scrape(value)
        assert result.success is False
        assert result.error == "Invalid URL provided"
        assert result.error_type == "InvalidInput"
        assert result.retryable is False

    def test_unfetchable_after_normalization(self):
        result = scrape("?")
        assert result.success is False
        assert result.error == "Invalid URL format"

    def test_fetch_failure(self):
        with patch(
            "pagedigest.query.fetch_html",
            side_effect=ExtractionFailed(TIMED_OUT, kind="timeout", url=URL),
        ):
            result = scrape(URL)
        assert result.success is False
        assert result.error == TIMED_OUT
        assert result.error_type == "ExtractionFailed"
        assert result.retryable is True

    def test_unencoded_path_is_a_failure_result(self):
        error = http.client.InvalidURL(
            "URL can't contain control characters. '/hello world' (found at least ' ')",
        )
        with _patch_opener(error=error) as build:
            result = scrape("example.com/hello world")
        request = build.return_value.open.call_args.args[0]
        assert request.full_url == "https://example.com/hello world"
        assert result.success is False
        assert result.error_type == "ExtractionFailed"
        assert "control characters" in result.error

    def test_parse_failure(self):
        with patch("pagedigest.query.fetch_html", return_value="<p>x</p>"), \
             patch("pagedigest.query.parse_html", side_effect=ParseFailed("bad", url=URL)):
            result = scrape(URL)
        assert result.success is False
        assert result.error_type == "ParseFailed"
        assert result.retryable is False


class TestTopLevelImport:
    def test_scrape_importable_from_package(self):
        from pagedigest import scrape as top_scrape
        assert callable(top_scrape)

    def test_version(self):
        import pagedigest
        assert pagedigest.__version__ == "0.1.0"
