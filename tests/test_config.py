"""
Tests for site configuration parsing and URL matching
"""

import json

import pytest

from sitesearch.core.config import Settings, SiteConfig, load_sites, normalize_site_url, strip_www


@pytest.mark.unit
class TestSiteUrls:
    def test_strip_www_only_touches_host(self):
        assert strip_www("https://www.example.com/a") == "https://example.com/a"
        assert strip_www("https://example.com/www.page") == "https://example.com/www.page"
        assert strip_www("www.example.com") == "example.com"

    def test_normalize_site_url(self):
        assert normalize_site_url(" https://WWW.example.com/ ") == "https://example.com"
        assert normalize_site_url("https://example.com/docs/www.archive/") == "https://example.com/docs/www.archive"

    def test_find_site_for_page(self):
        settings = Settings(sites=[SiteConfig.create("https://example.com", "Example")])

        assert settings.find_site_for_page("https://www.example.com/a").name == "Example"
        assert settings.find_site_for_page("https://example.com").name == "Example"
        assert settings.find_site_for_page("https://example.com.evil.org/a") is None
        assert settings.find_site_for_page("   ") is None


@pytest.mark.unit
class TestLoadSites:
    def test_parses_objects_and_plain_urls(self):
        raw = json.dumps([{"url": "https://example.com/", "name": "Example"}, "https://www.other.org"])

        sites = load_sites(raw)

        assert sites == [
            SiteConfig(url="https://example.com", name="Example"),
            SiteConfig(url="https://other.org", name="https://other.org"),
        ]

    def test_duplicate_sites_keep_first_entry(self):
        raw = json.dumps([
            {"url": "https://example.com", "name": "First"},
            {"url": "https://www.example.com/", "name": "Second"},
        ])

        sites = load_sites(raw)

        assert sites == [SiteConfig(url="https://example.com", name="First")]

    def test_reads_sites_file(self, tmp_path):
        path = tmp_path / "sites.json"
        path.write_text(json.dumps([{"url": "https://example.com", "name": "Example"}]), encoding="utf-8")

        assert load_sites(path=str(path)) == [SiteConfig(url="https://example.com", name="Example")]

    def test_nothing_configured(self):
        assert load_sites() == []
