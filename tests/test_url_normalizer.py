"""Tests for URL canonicalization."""

import pytest

from sitegraph.exceptions import MalformedLink
from sitegraph.url_normalizer import normalize_url, resolve_link, same_domain, title_from_url

BASE = "https://example.com/docs/intro"


class TestNormalizeUrl:
    """Test suite for normalize_url."""

    @pytest.mark.parametrize("href,expected", [
        ("https://example.com/a", "https://example.com/a"),
        ("/about", "https://example.com/about"),
        ("pricing", "https://example.com/pricing"),
        ("/a#section", "https://example.com/a"),
        ("https://EXAMPLE.com/A", "https://example.com/A"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com:443/a", "https://example.com/a"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
        ("/search?q=python", "https://example.com/search?q=python"),
        ("  /padded  ", "https://example.com/padded"),
        ("/docs/../about", "https://example.com/about"),
        ("/docs/./guide", "https://example.com/docs/guide"),
        ("../about", "https://example.com/about"),
        ("/a b", "https://example.com/a%20b"),
        ("/a%20b", "https://example.com/a%20b"),
    ])
    def test_canonical_form(self, href, expected):
        assert normalize_url(href, BASE) == expected

    @pytest.mark.parametrize("href", [
        "",
        "   ",
        "#top",
        "https://",
        "https://example.com:notaport/",
        "httpx://example.com/",
        None,
    ])
    def test_unusable_references(self, href):
        """Fragment-only, empty and unparsable references yield None."""
        assert normalize_url(href, BASE) is None

    def test_relative_without_base_origin(self):
        assert normalize_url("/a", "not a url") is None

    def test_idempotent(self):
        once = normalize_url("https://Example.com:443/a?b=1#c", BASE)
        assert normalize_url(once, once) == once

    def test_dot_segments_and_encoding_are_idempotent(self):
        """Canonical URLs survive a second pass unchanged."""
        once = normalize_url("/docs/../a b/./c?q=x y", BASE)
        assert once == "https://example.com/a%20b/c?q=x%20y"
        assert normalize_url(once, once) == once


class TestResolveLink:
    """Test suite for resolve_link."""

    def test_returns_canonical_url(self):
        assert resolve_link("../pricing#plans", BASE) == "https://example.com/pricing"

    @pytest.mark.parametrize("href", ["#top", "https://example.com:notaport/", ""])
    def test_unusable_href_raises(self, href):
        with pytest.raises(MalformedLink, match="Cannot normalize link"):
            resolve_link(href, BASE)


class TestSameDomain:
    """Test suite for same_domain."""

    def test_same_host(self):
        assert same_domain("https://example.com/a", "https://example.com/")

    def test_scheme_does_not_matter(self):
        assert same_domain("http://example.com/a", "https://example.com/")

    def test_subdomain_is_different(self):
        assert not same_domain("https://blog.example.com/", "https://example.com/")

    def test_other_host(self):
        assert not same_domain("https://other.org/", "https://example.com/")


class TestTitleFromUrl:
    """Test suite for title_from_url."""

    def test_last_segment(self):
        assert title_from_url("https://example.com/docs/getting-started/") == "getting-started"

    def test_root_uses_host(self):
        assert title_from_url("https://example.com/") == "example.com"

    def test_fallback(self):
        assert title_from_url("") == "Page"
