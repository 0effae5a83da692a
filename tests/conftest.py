"""
Shared fixtures: in-memory database, offline fetcher and indexing helpers
"""

import threading
from typing import Dict, Iterable, List, Optional

import pytest

from sitesearch.core.config import Settings, SiteConfig
from sitesearch.core.exceptions import FetchError
from sitesearch.crawl.models import FetchedDocument
from sitesearch.indexing.indexer import IndexBuilder
from sitesearch.indexing.lemmatizer import Lemmatizer
from sitesearch.storage.db import Database
from sitesearch.storage.models import Page, Site, SiteStatus
from sitesearch.storage.repositories import SiteRepository

SITE_URL = "https://example.com"


def html_page(body: str, title: Optional[str] = None, links: Iterable[str] = ()) -> str:
    anchors = "".join(f'<a href="{link}">link</a>' for link in links)
    head = f"<head><title>{title}</title></head>" if title else ""
    return f"<html>{head}<body><p>{body}</p>{anchors}</body></html>"


class FakeFetcher:
    """Serves canned documents by URL; unknown URLs fail like a 404"""

    def __init__(self, pages: Optional[Dict[str, str]] = None, links: Optional[Dict[str, Iterable[str]]] = None):
        self.pages = dict(pages or {})
        self.links = {url: set(found) for url, found in (links or {}).items()}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch(self, url: str) -> FetchedDocument:
        with self._lock:
            self.calls.append(url)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status_code=404)
        return FetchedDocument(url=url, status_code=200, html=self.pages[url], links=set(self.links.get(url, ())))


class BlockingFetcher(FakeFetcher):
    """Holds every fetch until ``release`` is set"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch(self, url: str) -> FetchedDocument:
        self.started.set()
        self.release.wait(10)
        return super().fetch(url)


@pytest.fixture(scope="session")
def lemmatizer():
    return Lemmatizer()


@pytest.fixture
def db():
    database = Database(":memory:")
    database.setup()
    yield database
    database.close()


@pytest.fixture
def settings():
    return Settings(
        database_path=":memory:",
        sites=[SiteConfig.create(SITE_URL, "Example")],
        request_delay=0,
        crawl_workers=2,
        batch_size=1000,
    )


@pytest.fixture
def site(db):
    return SiteRepository(db).save(Site(url=SITE_URL, name="Example", status=SiteStatus.INDEXED))


@pytest.fixture
def builder(db, lemmatizer):
    return IndexBuilder(db, lemmatizer)


@pytest.fixture
def index_html(builder, site):
    """Index ``html`` at ``path`` of the example site"""
    def _index(path: str, html: str, target: Optional[Site] = None) -> Page:
        target = target or site
        return builder.index_page(Page(site_id=target.id, path=path, code=200, content=html), target)
    return _index
