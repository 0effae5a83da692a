"""
Site crawler: concurrent recursive link expansion for a single site
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Set

from sitesearch.core.exceptions import FetchError, IndexingError
from sitesearch.storage.models import Page, Site
from sitesearch.storage.repositories import PageRepository

from .config import CrawlConfig
from .fetcher import DocumentFetcher
from .models import CrawlResult
from .url_filter import LinkScopeFilter

ROOT_PATH = "/"


class SiteCrawler:
    """Crawl one site from its root until the link graph is exhausted or a stop is requested.

    Every visited path is a task on a bounded worker pool. A task fetches its page,
    adds it to the pending batch and returns the unvisited in-scope child paths; the
    job thread forks those children as new tasks and joins them as they complete.
    Pages are handed to the index builder whenever the batch reaches
    ``config.batch_size`` and once more when the crawl ends.
    """

    def __init__(
        self,
        site: Site,
        fetcher: DocumentFetcher,
        pages: PageRepository,
        index_builder,
        config: Optional[CrawlConfig] = None,
        stop_event: Optional[threading.Event] = None,
        on_progress: Optional[Callable[[], None]] = None,
    ):
        self.site = site
        self.fetcher = fetcher
        self.pages = pages
        self.index_builder = index_builder
        self.config = config or CrawlConfig()
        self.stop_event = stop_event or threading.Event()
        self.on_progress = on_progress
        self.scope = LinkScopeFilter(site.url, self.config)

        self.logger = logging.getLogger(__name__)

        # Job-scoped shared state
        self._lock = threading.Lock()
        self._visited: Set[str] = set()
        self._collected: List[Page] = []
        self.result = CrawlResult(site_url=site.url)

    def _stopped(self) -> bool:
        return self.stop_event.is_set()

    def crawl(self) -> CrawlResult:
        """Run the crawl job to completion and return its outcome"""
        self.logger.info(f"Crawling {self.site.url} with {self.config.max_workers} workers")
        self._visited.add(ROOT_PATH)

        with ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=f"crawl-{self.site.id}",
        ) as executor:
            pending: Set[Future] = {executor.submit(self._visit, ROOT_PATH)}

            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)

                for future in done:
                    if future.cancelled():
                        continue
                    try:
                        children = future.result()
                    except Exception:
                        self.logger.exception(f"Crawl task failed for {self.site.url}")
                        with self._lock:
                            self.result.pages_failed += 1
                        continue
                    if self._stopped():
                        continue
                    for path in children:
                        pending.add(executor.submit(self._visit, path))

                if self._stopped():
                    for future in pending:
                        future.cancel()

        self._flush()

        self.result.urls_visited = len(self._visited)
        self.result.cancelled = self._stopped()
        self.logger.info(
            f"Crawl of {self.site.url} finished: {self.result.pages_indexed} pages indexed, "
            f"{self.result.pages_failed} failed, cancelled={self.result.cancelled}"
        )
        return self.result

    def _visit(self, path: str) -> List[str]:
        """Fetch one page and return the child paths to crawl next"""
        if self._stopped():
            return []

        # Rate limit; a stop request interrupts the delay
        if self.config.request_delay > 0 and self.stop_event.wait(self.config.request_delay):
            return []

        url = self.site.url + path
        try:
            document = self.fetcher.fetch(url)
        except FetchError as e:
            self._record_failure(path, str(e))
            return []
        except Exception as e:
            self.logger.exception(f"Unexpected error fetching {url}")
            self._record_failure(path, f"Unexpected error fetching {url}: {e}")
            return []

        if self._stopped():
            return []

        page = Page(
            site_id=self.site.id,
            path=path,
            code=document.status_code,
            content=document.html,
        )
        self._collect(page)
        return self._select_children(document.links)

    def _record_failure(self, path: str, error: str) -> None:
        self.logger.warning(f"Indexing error site {self.site.url}, page {path}: {error}")
        with self._lock:
            self.result.pages_failed += 1
            if path == ROOT_PATH and self.result.error is None:
                self.result.error = error

    def _select_children(self, links: Set[str]) -> List[str]:
        candidates = set()
        with self._lock:
            for link in links:
                should_crawl, _ = self.scope.should_crawl_url(link, self._visited)
                if should_crawl:
                    candidates.add(self.scope.to_path(link))

        if not candidates:
            return []

        stored = set(self.pages.find_paths_in_and_site(candidates, self.site))

        with self._lock:
            children = sorted(p for p in candidates - stored if p not in self._visited)
            self._visited.update(children)
        return children

    def _collect(self, page: Page) -> None:
        batch = None
        with self._lock:
            self._collected.append(page)
            if len(self._collected) >= self.config.batch_size:
                batch, self._collected = self._collected, []

        if batch:
            self.logger.info(f"Flushing batch of {len(batch)} pages for {self.site.url}")
            self._index(batch)
        elif self.on_progress:
            self.on_progress()

    def _flush(self) -> None:
        with self._lock:
            batch, self._collected = self._collected, []
        if batch:
            self._index(batch)

    def _index(self, batch: List[Page]) -> None:
        try:
            indexed = self.index_builder.index_pages(batch, self.site)
        except Exception as e:
            error = IndexingError(f"Indexing error site {self.site.url}: {e}")
            self.logger.exception(str(error))
            with self._lock:
                if self.result.error is None:
                    self.result.error = str(error)
            return

        with self._lock:
            self.result.pages_indexed += indexed
        if self.on_progress:
            self.on_progress()
