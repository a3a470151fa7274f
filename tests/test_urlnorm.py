"""Unit tests for URL normalization utilities."""

from __future__ import annotations

import pytest

from pagedigest.errors import InvalidInput
from pagedigest.extractors.urlnorm import (
    domain_info,
    extract_host,
    is_fetchable_url,
    normalize_url,
    resolve_url,
)


class TestNormalizeUrl:
    def test_bare_domain_gets_https(self):
        assert normalize_url("example.com") == "https://example.com"

    def test_localhost_gets_http(self):
        assert normalize_url("localhost:3000") == "http://localhost:3000"

    def test_loopback_ip_gets_http(self):
        assert normalize_url("127.0.0.1:8080/app") == "http://127.0.0.1:8080/app"

    def test_existing_scheme_kept(self):
        assert normalize_url("http://example.com/page") == "http://example.com/page"

    def test_scheme_match_is_case_insensitive(self):
        assert normalize_url("HTTPS://Example.com") == "HTTPS://Example.com"

    def test_protocol_relative(self):
        assert normalize_url("//cdn.example.com/lib") == "https://cdn.example.com/lib"

    def test_whitespace_and_slashes_trimmed(self):
        assert normalize_url("  example.com/  ") == "https://example.com"

    def test_non_domain_defaults_to_https(self):
        assert normalize_url("intranet") == "https://intranet"

    @pytest.mark.parametrize("value", ["", None, 42, ["example.com"]])
    def test_invalid_input_raises(self, value):
        with pytest.raises(InvalidInput) as exc_info:
            normalize_url(value)
        assert str(exc_info.value) == "Invalid URL provided"

    def test_only_slashes_raises(self):
        with pytest.raises(InvalidInput):
            normalize_url("  ///  ")

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            normalize_url("")


class TestIsFetchableUrl:
    def test_https_with_host(self):
        assert is_fetchable_url("https://example.com/")

    def test_ftp_rejected(self):
        assert not is_fetchable_url("ftp://example.com/file.txt")

    def test_missing_host_rejected(self):
        assert not is_fetchable_url("https://")


class TestResolveUrl:
    def test_relative_path(self):
        assert resolve_url("/about", "https://example.com/blog/") == "https://example.com/about"

    def test_relative_to_directory(self):
        assert resolve_url("post", "https://example.com/blog/") == "https://example.com/blog/post"

    def test_absolute_unchanged(self):
        assert resolve_url("https://other.org/x", "https://example.com/") == "https://other.org/x"

    def test_no_base_returns_candidate(self):
        assert resolve_url(" /about ", "") == "/about"

    def test_empty_candidate(self):
        assert resolve_url("", "https://example.com/") == ""

    def test_unresolvable_returns_candidate(self):
        # An unterminated IPv6 literal makes urljoin raise.
        assert resolve_url("http://[::1", "https://example.com/") == "http://[::1"


class TestExtractHost:
    def test_lowercased_host(self):
        assert extract_host("https://WWW.Example.COM/path") == "www.example.com"

    def test_relative_has_no_host(self):
        assert extract_host("/about") is None


class TestDomainInfo:
    def test_fields(self):
        info = domain_info("https://Example.com:8443/docs/intro")
        assert info is not None
        assert info.domain == "example.com"
        assert info.protocol == "https"
        assert info.path == "/docs/intro"
        assert info.host == "example.com:8443"
        assert info.origin == "https://example.com:8443"

    def test_root_path_defaults_to_slash(self):
        info = domain_info("https://example.com")
        assert info is not None
        assert info.path == "/"

    def test_no_netloc(self):
        assert domain_info("not a url") is None
