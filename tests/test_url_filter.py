"""
Tests for link scope filtering
"""

import pytest

from sitesearch.crawl.config import CrawlConfig
from sitesearch.crawl.url_filter import LinkScopeFilter, is_in_scope, strip_protocol


@pytest.mark.unit
class TestStripProtocol:
    def test_strips_scheme_and_www(self):
        assert strip_protocol("https://www.example.com/a") == "example.com/a"
        assert strip_protocol("http://example.com") == "example.com"


@pytest.mark.unit
class TestLinkScopeFilter:
    def setup_method(self):
        self.scope = LinkScopeFilter("https://example.com")

    @pytest.mark.parametrize("url", [
        "https://example.com/",
        "https://example.com/news",
        "https://example.com/news/2024/item",
        "http://www.example.com/about",
        "https://example.com/page.html",
    ])
    def test_in_scope(self, url):
        assert self.scope.is_in_scope(url)

    @pytest.mark.parametrize("url", [
        "",
        "https://other.com/news",
        "https://example.com.evil.org/news",
        "https://example.com/news#comments",
        "https://example.com/search?q=1",
        "https://example.com/file.pdf",
        "https://example.com/image.jpg",
        "https://example.com/a%20b",
        "mailto:admin@example.com",
        "https://example.com/wp-admin/users",
        "https://example.com/feed/",
    ])
    def test_out_of_scope(self, url):
        assert not self.scope.is_in_scope(url)

    def test_rejects_long_urls(self):
        scope = LinkScopeFilter("https://example.com", CrawlConfig(max_url_length=30))
        assert not scope.is_in_scope("https://example.com/" + "a" * 40)

    def test_should_crawl_url(self):
        visited = {"/", "/seen"}

        assert self.scope.should_crawl_url("https://example.com/new", visited) == (True, "passed_all_filters")
        assert self.scope.should_crawl_url("https://example.com/seen", visited) == (False, "already_visited")
        assert self.scope.should_crawl_url("https://other.com/x", visited) == (False, "out_of_scope")

    def test_to_path(self):
        assert self.scope.to_path("https://example.com/a/b") == "/a/b"
        assert self.scope.to_path("https://www.example.com/a") == "/a"
        assert self.scope.to_path("https://example.com") == "/"

    def test_module_level_helper(self):
        assert is_in_scope("https://example.com/x", "https://example.com")
        assert not is_in_scope("https://example.com/x#y", "https://example.com")
