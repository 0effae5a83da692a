"""
Search service: lemma-intersection ranking over the inverted index
"""

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

from sitesearch.core.config import ALL_SITES, Settings, normalize_site_url
from sitesearch.core.exceptions import EmptyQueryError, NoSiteFilterError, UnknownSiteError
from sitesearch.indexing.lemmatizer import Lemmatizer, extract_title, strip_markup
from sitesearch.storage.db import Database
from sitesearch.storage.models import Lemma, Page, Site
from sitesearch.storage.repositories import (
    IndexRepository,
    LemmaRepository,
    PageRepository,
    SiteRepository,
)

from .snippets import SnippetBuilder

logger = logging.getLogger(__name__)

# Lemmas found on a larger share of the searched pages are ignored in multi-word queries
FREQUENCY_THRESHOLD = 0.9
MAX_SNIPPET_LENGTH = 200


@dataclass
class SearchItem:
    site: str
    site_name: str
    uri: str
    title: str
    snippet: str
    relevance: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchResult:
    count: int = 0
    data: List[SearchItem] = field(default_factory=list)


@dataclass
class _Match:
    site: Site
    page: Page
    absolute: float


class SearchService:
    """Ranked full-text search across the indexed sites"""

    def __init__(self, settings: Settings, db: Database, lemmatizer: Optional[Lemmatizer] = None):
        self.settings = settings
        self.lemmatizer = lemmatizer or Lemmatizer()
        self.snippets = SnippetBuilder(self.lemmatizer, MAX_SNIPPET_LENGTH)

        self.sites = SiteRepository(db)
        self.pages = PageRepository(db)
        self.lemmas = LemmaRepository(db)
        self.indexes = IndexRepository(db)

    def search(self, query: str, site: str = ALL_SITES, offset: int = 0,
               limit: Optional[int] = None) -> SearchResult:
        """Pages containing every lemma of ``query``, most relevant first.

        ``count`` is the total number of matches; ``data`` holds the
        ``[offset, offset + limit)`` slice of the matches ordered by path.
        """
        self._validate(query, site)
        limit = self.settings.search_limit if limit is None else limit
        offset = max(offset, 0)

        query_lemmas = self.lemmatizer.lemma_set(query)
        if not query_lemmas:
            logger.info(f"Query {query!r} has no searchable words")
            return SearchResult()

        sites = self._sites_to_search(site)
        rows = self.lemmas.find_by_site_in_and_lemma_in(sites, query_lemmas)
        if len(rows) < len(query_lemmas):
            return SearchResult()

        matches = []
        rows_by_site = self._group_by_site(rows, sites, len(query_lemmas))
        for searched_site, site_rows in rows_by_site:
            matches.extend(self._match_site(searched_site, site_rows))

        if not matches:
            return SearchResult()

        max_absolute = max(match.absolute for match in matches)
        matches.sort(key=lambda m: (m.page.path, m.site.url))
        window = matches[offset:offset + max(limit, 0)]
        window.sort(key=lambda m: m.absolute, reverse=True)

        data = [self._to_item(match, max_absolute, query_lemmas) for match in window]
        logger.info(f"Query {query!r} on {site}: {len(matches)} matches")
        return SearchResult(count=len(matches), data=data)

    def _validate(self, query: str, site: str) -> None:
        if not query or not query.strip():
            raise EmptyQueryError()
        if not site or not site.strip():
            raise NoSiteFilterError()
        if site != ALL_SITES and self.settings.find_site(site) is None:
            raise UnknownSiteError()

    def _sites_to_search(self, site: str) -> List[Site]:
        if site == ALL_SITES:
            return self.sites.find_all()
        stored = self.sites.find_by_url(normalize_site_url(site))
        return [stored] if stored else []

    def _group_by_site(self, rows: List[Lemma], sites: List[Site],
                       lemma_count: int) -> List[Tuple[Site, List[Lemma]]]:
        """Per-site lemma rows, rarest first, for sites that hold every query lemma"""
        by_site: Dict[int, List[Lemma]] = defaultdict(list)
        for row in rows:
            by_site[row.site_id].append(row)

        check_noise = lemma_count > 1
        total_pages = self.pages.count_by_sites(sites) if check_noise else 0

        grouped = []
        for site in sites:
            site_rows = by_site.get(site.id, [])
            if len(site_rows) < lemma_count:
                continue
            if check_noise and total_pages:
                site_rows = [r for r in site_rows if r.frequency / total_pages <= FREQUENCY_THRESHOLD]
            if not site_rows:
                continue
            site_rows.sort(key=lambda r: (r.frequency, r.lemma))
            grouped.append((site, site_rows))
        return grouped

    def _match_site(self, site: Site, rows: List[Lemma]) -> List[_Match]:
        # Seed from the rarest lemma and narrow with each further one
        ranks = {entry.page_id: entry.rank for entry in self.indexes.find_by_lemma(rows[0])}
        for row in rows[1:]:
            if not ranks:
                break
            entries = {entry.page_id: entry.rank for entry in self.indexes.find_by_lemma(row)}
            ranks = {page_id: rank + entries[page_id] for page_id, rank in ranks.items() if page_id in entries}

        pages = self.pages.find_by_ids(ranks)
        return [_Match(site, pages[page_id], absolute) for page_id, absolute in ranks.items() if page_id in pages]

    def _to_item(self, match: _Match, max_absolute: float, query_lemmas) -> SearchItem:
        content = match.page.content
        text = strip_markup(content, body_only=True)
        return SearchItem(
            site=match.site.url,
            site_name=match.site.name,
            uri=match.page.path,
            title=extract_title(content) or match.page.path,
            snippet=self.snippets.build(text, query_lemmas),
            relevance=match.absolute / max_absolute,
        )
