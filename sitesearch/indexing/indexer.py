"""
Index builder: maintain the per-site lemma table and the page-lemma inverted index
"""

import logging
from typing import Iterable, Optional

from sitesearch.storage.db import Database
from sitesearch.storage.models import IndexEntry, Page, Site
from sitesearch.storage.repositories import IndexRepository, LemmaRepository, PageRepository

from .lemmatizer import Lemmatizer

logger = logging.getLogger(__name__)


class IndexBuilder:
    """Add pages to and remove pages from a site's index.

    Lemma frequency counts pages, not occurrences: indexing a page adds one to
    every lemma it contains, removing it subtracts one and deletes lemmas that
    drop to zero. Index rank is the occurrence count within the page.
    """

    def __init__(self, db: Database, lemmatizer: Optional[Lemmatizer] = None):
        self.db = db
        self.lemmatizer = lemmatizer or Lemmatizer()
        self.pages = PageRepository(db)
        self.lemmas = LemmaRepository(db)
        self.indexes = IndexRepository(db)

    def index_pages(self, pages: Iterable[Page], site: Site) -> int:
        """Store and index each page; returns the number of pages indexed"""
        indexed = 0
        for page in pages:
            if self.index_page(page, site) is not None:
                indexed += 1
        return indexed

    def index_page(self, page: Page, site: Site) -> Optional[Page]:
        """Store one page and its index rows; None if (site, path) is already stored"""
        # Lemmatization runs outside the database lock
        frequencies = self.lemmatizer.lemma_frequencies(page.content)

        page.site_id = site.id
        with self.db.transaction():
            saved = self.pages.save(page)
            if saved is None:
                logger.debug(f"Page {page.path} already stored for {site.url}")
                return None

            entries = []
            for lemma, count in frequencies.items():
                lemma_row = self.lemmas.increment(site.id, lemma)
                entries.append(IndexEntry(page_id=saved.id, lemma_id=lemma_row.id, rank=count))
            self.indexes.save_all(entries)

        logger.debug(f"Indexed {site.url}{page.path}: {len(frequencies)} lemmas")
        return saved

    def deindex_page(self, page: Page) -> None:
        """Retract a page's lemma counts and delete it with its index rows"""
        with self.db.transaction():
            lemmas = self.indexes.find_lemmas_by_page(page)

            to_delete = []
            to_update = []
            for lemma in lemmas:
                lemma.frequency -= 1
                if lemma.frequency <= 0:
                    to_delete.append(lemma)
                else:
                    to_update.append(lemma)

            self.pages.delete(page)
            self.lemmas.delete_all(to_delete)
            self.lemmas.save_all(to_update)

        logger.info(f"Removed page {page.path} and {len(to_delete)} orphaned lemmas")
