"""
Service boundary: wrap the core services into structured API responses
"""
import logging
from typing import Optional

from sitesearch.api.models import (
    DetailedStatisticsItem,
    IndexingResponse,
    SearchItemModel,
    SearchResponse,
    StatisticsData,
    StatisticsResponse,
    TotalStatistics,
)
from sitesearch.core.config import ALL_SITES
from sitesearch.core.exceptions import SiteSearchError
from sitesearch.indexing.service import IndexingService
from sitesearch.search.service import SearchService
from sitesearch.storage.db import Database
from sitesearch.storage.repositories import LemmaRepository, PageRepository, SiteRepository

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "Internal error, see server log"


class IndexingBoundary:
    """Service untuk operasi indexing"""

    def __init__(self, service: IndexingService):
        self.service = service

    def _call(self, operation, *args) -> IndexingResponse:
        try:
            operation(*args)
        except SiteSearchError as e:
            logger.warning(f"{operation.__name__} rejected: {e}")
            return IndexingResponse(result=False, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in {operation.__name__}: {e}")
            return IndexingResponse(result=False, error=UNEXPECTED_ERROR)
        return IndexingResponse(result=True)

    def start_indexing(self) -> IndexingResponse:
        return self._call(self.service.start_indexing)

    def stop_indexing(self) -> IndexingResponse:
        return self._call(self.service.stop_indexing)

    def index_page(self, url: str) -> IndexingResponse:
        return self._call(self.service.index_page, url)


class SearchBoundary:
    """Service untuk operasi search"""

    def __init__(self, service: SearchService):
        self.service = service

    def search(self, query: str, site: str = ALL_SITES, offset: int = 0,
               limit: Optional[int] = None) -> SearchResponse:
        try:
            result = self.service.search(query, site, offset, limit)
        except SiteSearchError as e:
            logger.info(f"Search rejected: {e}")
            return SearchResponse(result=False, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error during search: {e}")
            return SearchResponse(result=False, error=UNEXPECTED_ERROR)

        return SearchResponse(
            result=True,
            count=result.count,
            data=[SearchItemModel(**item.to_dict()) for item in result.data],
        )


class StatisticsService:
    """Read-only counter rollup over the stored sites"""

    def __init__(self, db: Database, indexing: IndexingService):
        self.indexing = indexing
        self.sites = SiteRepository(db)
        self.pages = PageRepository(db)
        self.lemmas = LemmaRepository(db)

    def get_statistics(self) -> StatisticsResponse:
        try:
            sites = self.sites.find_all()
            detailed = [
                DetailedStatisticsItem(
                    url=site.url,
                    name=site.name,
                    status=site.status.value,
                    status_time=int(site.status_time.timestamp()),
                    error=site.last_error,
                    pages=self.pages.count_by_site(site),
                    lemmas=self.lemmas.count_by_site(site),
                )
                for site in sites
            ]
            total = TotalStatistics(
                sites=len(sites),
                pages=self.pages.count(),
                lemmas=self.lemmas.count(),
                indexing=self.indexing.is_indexing(),
            )
        except Exception as e:
            logger.exception(f"Failed to collect statistics: {e}")
            return StatisticsResponse(result=False, error=UNEXPECTED_ERROR)

        return StatisticsResponse(result=True, statistics=StatisticsData(total=total, detailed=detailed))
