"""
Tests for the HTTP document fetcher
"""

from unittest.mock import patch

import pytest
import requests

from sitesearch.core.config import BotIdentity
from sitesearch.core.exceptions import FetchError
from sitesearch.crawl.fetcher import DocumentFetcher


def make_response(url, body, status=200, content_type="text/html; charset=utf-8"):
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response.headers["Content-Type"] = content_type
    response.url = url
    response.encoding = "utf-8"
    return response


@pytest.mark.unit
class TestDocumentFetcher:
    def setup_method(self):
        self.fetcher = DocumentFetcher(BotIdentity(user_agent="TestBot/2.0", referrer="http://ref.example"))

    def test_session_carries_bot_identity(self):
        headers = self.fetcher.session.headers
        assert headers["User-Agent"] == "TestBot/2.0"
        assert headers["Referer"] == "http://ref.example"

    def test_fetch_returns_html_and_absolute_links(self):
        body = (
            '<html><body>'
            '<a href="/news">news</a>'
            '<a href="about">about</a>'
            '<a href="https://other.org/x">other</a>'
            '<a href="mailto:me@example.com">mail</a>'
            '<link href="/style.css">'
            '</body></html>'
        )
        response = make_response("https://example.com/dir/", body)

        with patch.object(requests.Session, "get", return_value=response) as get:
            document = self.fetcher.fetch("https://example.com/dir/")

        get.assert_called_once()
        assert document.status_code == 200
        assert document.html == body
        assert document.links == {
            "https://example.com/news",
            "https://example.com/dir/about",
            "https://other.org/x",
            "https://example.com/style.css",
        }

    def test_http_error_raises_fetch_error(self):
        response = make_response("https://example.com/missing", "not found", status=404)

        with patch.object(requests.Session, "get", return_value=response):
            with pytest.raises(FetchError) as exc_info:
                self.fetcher.fetch("https://example.com/missing")

        assert exc_info.value.status_code == 404
        assert "https://example.com/missing" in str(exc_info.value)

    def test_non_html_content_raises_fetch_error(self):
        response = make_response("https://example.com/data", "{}", content_type="application/json")

        with patch.object(requests.Session, "get", return_value=response):
            with pytest.raises(FetchError):
                self.fetcher.fetch("https://example.com/data")

    def test_network_error_raises_fetch_error(self):
        with patch.object(requests.Session, "get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(FetchError) as exc_info:
                self.fetcher.fetch("https://example.com/")

        assert "refused" in str(exc_info.value)
