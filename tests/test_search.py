"""
Tests for ranked search over the inverted index
"""

import pytest

from sitesearch.core.config import ALL_SITES, SiteConfig
from sitesearch.core.exceptions import EmptyQueryError, NoSiteFilterError, UnknownSiteError
from sitesearch.search.service import SearchService
from sitesearch.storage.models import Site, SiteStatus
from sitesearch.storage.repositories import SiteRepository

from conftest import SITE_URL, html_page


@pytest.fixture
def service(settings, db, lemmatizer):
    return SearchService(settings, db, lemmatizer)


@pytest.mark.unit
class TestSearchValidation:
    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, service, query):
        with pytest.raises(EmptyQueryError):
            service.search(query, SITE_URL)

    def test_blank_site_filter(self, service):
        with pytest.raises(NoSiteFilterError):
            service.search("кошка", " ")

    def test_unknown_site(self, service):
        with pytest.raises(UnknownSiteError):
            service.search("кошка", "https://unknown.org")

    def test_query_without_searchable_words(self, service, index_html):
        index_html("/a", html_page("кошка"))

        result = service.search("и в на", SITE_URL)

        assert result.count == 0
        assert result.data == []

    def test_unindexed_lemma_returns_empty_result(self, service, index_html):
        index_html("/a", html_page("кошка"))

        assert service.search("жираф", ALL_SITES).count == 0


@pytest.mark.integration
class TestSearchRanking:
    def test_equal_ranks_normalize_to_one(self, service, index_html):
        index_html("/a", html_page("кошка собака"))
        index_html("/b", html_page("кошка"))

        result = service.search("кошка", SITE_URL)

        assert result.count == 2
        assert sorted(item.uri for item in result.data) == ["/a", "/b"]
        assert all(item.relevance == 1.0 for item in result.data)

    def test_relevance_is_relative_to_best_match(self, service, index_html):
        index_html("/a", html_page("кошка"))
        index_html("/b", html_page("кошка кошка кошка кошка"))

        result = service.search("кошки", SITE_URL)

        assert [item.uri for item in result.data] == ["/b", "/a"]
        assert result.data[0].relevance == 1.0
        assert result.data[1].relevance == pytest.approx(0.25)

    def test_all_query_lemmas_must_match(self, service, index_html):
        index_html("/a", html_page("кошка собака"))
        index_html("/b", html_page("кошка"))
        index_html("/c", html_page("собака"))

        result = service.search("кошка собака", SITE_URL)

        assert result.count == 1
        assert result.data[0].uri == "/a"
        assert result.data[0].relevance == 1.0

    def test_ubiquitous_lemma_is_ignored_in_multi_word_queries(self, service, index_html):
        index_html("/a", html_page("кошка собака"))
        index_html("/b", html_page("кошка"))

        # "кошка" is on every page, so only "собака" decides the match
        result = service.search("кошка собака", SITE_URL)

        assert [item.uri for item in result.data] == ["/a"]

    def test_pagination_slices_by_path(self, service, index_html):
        index_html("/a", html_page("кошка"))
        index_html("/b", html_page("кошка кошка"))
        index_html("/c", html_page("кошка кошка кошка"))

        first = service.search("кошка", SITE_URL, offset=0, limit=2)
        second = service.search("кошка", SITE_URL, offset=2, limit=2)

        assert first.count == 3
        assert [item.uri for item in first.data] == ["/b", "/a"]
        assert [item.uri for item in second.data] == ["/c"]
        assert second.data[0].relevance == 1.0

    def test_default_limit_comes_from_settings(self, settings, db, lemmatizer, index_html):
        settings.search_limit = 1
        index_html("/a", html_page("кошка"))
        index_html("/b", html_page("кошка"))

        result = SearchService(settings, db, lemmatizer).search("кошка", SITE_URL)

        assert result.count == 2
        assert len(result.data) == 1

    def test_item_fields(self, service, index_html):
        index_html("/a", html_page("Рыжая кошка спит", title="Про кошек"))
        index_html("/b", html_page("кошка"))

        items = {item.uri: item for item in service.search("кошка", SITE_URL).data}

        assert items["/a"].title == "Про кошек"
        assert items["/a"].site == SITE_URL
        assert items["/a"].site_name == "Example"
        assert "<b>кошка</b>" in items["/a"].snippet
        assert items["/b"].title == "/b"

    def test_all_sites_and_site_filter(self, settings, db, service, index_html):
        settings.sites.append(SiteConfig.create("https://other.org", "Other"))
        other = SiteRepository(db).save(Site(url="https://other.org", name="Other", status=SiteStatus.INDEXED))
        index_html("/a", html_page("кошка"))
        index_html("/a", html_page("кошка"), target=other)

        everywhere = service.search("кошка", ALL_SITES)
        only_other = service.search("кошка", "https://www.other.org/")

        assert everywhere.count == 2
        assert [item.site for item in everywhere.data] == ["https://example.com", "https://other.org"]
        assert [item.site for item in only_other.data] == ["https://other.org"]
