"""
Exception taxonomy untuk search engine core
"""
from typing import Optional


class SiteSearchError(Exception):
    """Base class for all user-visible errors"""

    message = "Search engine error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class AlreadyRunningError(SiteSearchError):
    message = "Indexing is already running"


class NotRunningError(SiteSearchError):
    message = "Indexing is not running"


class OutOfScopeError(SiteSearchError):
    message = "This page is outside the sites listed in the configuration"


class FetchError(SiteSearchError):
    """Network or HTTP failure while fetching a document"""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class EmptyQueryError(SiteSearchError):
    message = "Search query is empty"


class NoSiteFilterError(SiteSearchError):
    message = "Search site is not specified"


class UnknownSiteError(SiteSearchError):
    message = "Specified site was not found in the configuration"


class IndexingError(SiteSearchError):
    message = "Indexing failed"
