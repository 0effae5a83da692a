"""
Indexing service: full crawl cycles over every configured site and single-page reindexing
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Dict, List, Optional

from sitesearch.core.config import Settings, strip_www
from sitesearch.core.exceptions import (
    AlreadyRunningError,
    IndexingError,
    NotRunningError,
    OutOfScopeError,
)
from sitesearch.crawl.config import CrawlConfig
from sitesearch.crawl.crawler import SiteCrawler
from sitesearch.crawl.fetcher import DocumentFetcher
from sitesearch.crawl.models import CrawlResult
from sitesearch.storage.db import Database
from sitesearch.storage.models import Page, Site, SiteStatus
from sitesearch.storage.repositories import PageRepository, SiteRepository

from .indexer import IndexBuilder
from .lemmatizer import Lemmatizer

logger = logging.getLogger(__name__)

STOPPED_BY_USER = "Indexing stopped by user"


class IndexingPhase(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"


class IndexingState:
    """Lock-guarded lifecycle of the crawl cycle"""

    def __init__(self):
        self._lock = threading.Lock()
        self._phase = IndexingPhase.IDLE
        self._idle = threading.Event()
        self._idle.set()

    @property
    def phase(self) -> IndexingPhase:
        with self._lock:
            return self._phase

    def begin(self) -> bool:
        with self._lock:
            if self._phase is not IndexingPhase.IDLE:
                return False
            self._phase = IndexingPhase.RUNNING
            self._idle.clear()
            return True

    def request_stop(self) -> bool:
        with self._lock:
            if self._phase is not IndexingPhase.RUNNING:
                return False
            self._phase = IndexingPhase.STOPPING
            return True

    def finish(self) -> None:
        with self._lock:
            self._phase = IndexingPhase.IDLE
            self._idle.set()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        return self._idle.wait(timeout)


class IndexingService:
    """Orchestrates crawl cycles and single-page reindexing.

    A cycle runs one crawl job per configured site on its own thread pool and
    returns to IDLE once the last job has finished or been cancelled.
    """

    def __init__(
        self,
        settings: Settings,
        db: Database,
        fetcher: Optional[DocumentFetcher] = None,
        lemmatizer: Optional[Lemmatizer] = None,
    ):
        self.settings = settings
        self.db = db
        self.crawl_config = CrawlConfig.from_settings(settings)
        self.fetcher = fetcher or DocumentFetcher(settings.bot, self.crawl_config)
        self.index_builder = IndexBuilder(db, lemmatizer)

        self.sites = SiteRepository(db)
        self.pages = PageRepository(db)

        self.state = IndexingState()
        self._page_lock = threading.Lock()

        # Cycle-scoped
        self._jobs_lock = threading.RLock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._stop_event = threading.Event()
        self._remaining = 0
        self.results: Dict[str, CrawlResult] = {}

    def is_indexing(self) -> bool:
        return self.state.phase is not IndexingPhase.IDLE

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current cycle has finished; False on timeout"""
        return self.state.wait_idle(timeout)

    def start_indexing(self) -> None:
        """Start a crawl cycle over every configured site and return immediately"""
        if not self.state.begin():
            raise AlreadyRunningError()

        # Published before any work so a stop during site preparation is not lost
        stop_event = threading.Event()
        with self._jobs_lock:
            self._stop_event = stop_event
            self._executor = None
            self.results = {}

        try:
            sites = self._prepare_sites()
        except Exception:
            self.state.finish()
            raise

        if not sites:
            logger.warning("No sites configured; nothing to index")
            self.state.finish()
            return

        with self._jobs_lock:
            stopped = stop_event.is_set()
            if not stopped:
                executor = ThreadPoolExecutor(max_workers=len(sites), thread_name_prefix="indexing")
                self._executor = executor
                self._remaining = len(sites)

                logger.info(f"Indexing started for {len(sites)} sites")
                for site in sites:
                    future = executor.submit(self._run_site_job, site, stop_event)
                    future.add_done_callback(partial(self._job_finished, site))

        if stopped:
            for site in sites:
                self._finish_site(site, STOPPED_BY_USER)
            self.state.finish()
            logger.info("Indexing stopped before any crawl job started")

    def stop_indexing(self) -> None:
        """Ask every running crawl job to stop; queued jobs are cancelled"""
        if not self.state.request_stop():
            raise NotRunningError()

        logger.info("Stop requested, cancelling crawl jobs")
        with self._jobs_lock:
            self._stop_event.set()
            executor = self._executor

        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def index_page(self, url: str) -> Page:
        """Refetch and reindex a single page of a configured site"""
        site_config = self.settings.find_site_for_page(url)
        if site_config is None:
            raise OutOfScopeError()

        with self._page_lock:
            site = self.sites.find_by_url(site_config.url)
            if site is None:
                site = self.sites.save(
                    Site(url=site_config.url, name=site_config.name, status=SiteStatus.INDEXED)
                )

            normalized = strip_www(url)
            path = normalized[len(site.url):] or "/"

            existing = self.pages.find_by_path_and_site(path, site)
            if existing is not None:
                self.index_builder.deindex_page(existing)

            document = self.fetcher.fetch(url.strip())
            page = Page(site_id=site.id, path=path, code=document.status_code, content=document.html)
            self.index_builder.index_page(page, site)
            self.sites.touch(site)

        logger.info(f"Reindexed {site.url}{path}")
        return page

    def _prepare_sites(self) -> List[Site]:
        """Drop the previous index of every configured site and register it afresh"""
        sites = []
        with self.db.transaction():
            for site_config in self.settings.sites:
                old = self.sites.find_by_url(site_config.url)
                if old is not None:
                    self.sites.delete(old)
                sites.append(self.sites.save(Site(url=site_config.url, name=site_config.name)))
        return sites

    def _run_site_job(self, site: Site, stop_event: threading.Event) -> CrawlResult:
        crawler = SiteCrawler(
            site,
            self.fetcher,
            self.pages,
            self.index_builder,
            config=self.crawl_config,
            stop_event=stop_event,
            on_progress=partial(self.sites.touch, site),
        )
        try:
            result = crawler.crawl()
        except Exception as e:
            error = IndexingError(f"Indexing error site {site.url}: {e}")
            logger.exception(str(error))
            result = CrawlResult(site_url=site.url, error=str(error))

        if result.cancelled:
            result.error = STOPPED_BY_USER
        self.results[site.url] = result
        self._finish_site(site, result.error)
        return result

    def _finish_site(self, site: Site, error: Optional[str]) -> None:
        site.status = SiteStatus.FAILED if error else SiteStatus.INDEXED
        site.last_error = error or ""
        site.status_time = datetime.now()
        self.sites.save(site)
        logger.info(f"Site {site.url} finished with status {site.status.value}")

    def _job_finished(self, site: Site, future: Future) -> None:
        if future.cancelled():
            # Job was still queued when the cycle was stopped
            self._finish_site(site, STOPPED_BY_USER)

        with self._jobs_lock:
            self._remaining -= 1
            last = self._remaining == 0
            executor = self._executor if last else None
            if last:
                self._executor = None

        if last:
            executor.shutdown(wait=False)
            self.state.finish()
            logger.info("Indexing cycle finished")
