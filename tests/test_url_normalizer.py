"""
Unit tests for URL normalization.
"""

import pytest

from bookmark_archiver.utils.error_handler import URLParseError
from bookmark_archiver.utils.url_normalizer import normalize_url


class TestNormalizeURL:
    """Test normalize_url."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("http://example.com", "http://example.com"),
            ("https://example.com/", "https://example.com/"),
            ("HTTP://example.com/Path", "http://example.com/Path"),
            ("https://example.com/a?b=1&c=2#top", "https://example.com/a?b=1&c=2#top"),
            ("https://example.com:8443/x", "https://example.com:8443/x"),
            ("https://example.com/caf%C3%A9", "https://example.com/caf%C3%A9"),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_url(raw) == expected

    def test_idempotent(self):
        once = normalize_url("HTTPS://Example.com/a?q=1")
        assert normalize_url(once) == once

    def test_relative_url_is_accepted(self):
        """Scheme-less input parses; fetching it is what fails."""
        assert normalize_url("example.com/page") == "example.com/page"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "http://example.com/\x00",
            "http://exa\nmple.com",
            "http://example.com/%zz",
            "http://example.com/100%",
            "http://[::1",
            "http://example.com:port/",
            "http://example.com:99999/",
            " http://example.com",
            "http://example.com ",
        ],
    )
    def test_rejects_unparseable(self, raw):
        with pytest.raises(URLParseError, match="parsing URL"):
            normalize_url(raw)

    @pytest.mark.parametrize(
        "raw",
        ["http://example.com/?", "http://example.com/?#top", "http://example.com?"],
    )
    def test_keeps_empty_query(self, raw):
        assert normalize_url(raw) == raw

    def test_empty_query_is_a_distinct_key(self):
        assert normalize_url("http://example.com/?") != normalize_url(
            "http://example.com/"
        )

    def test_empty_fragment_is_dropped(self):
        assert normalize_url("http://example.com/#") == "http://example.com/"
