"""
Data models for the crawler
"""

from dataclasses import dataclass, field
from typing import Optional, Set


@dataclass
class FetchedDocument:
    """Result of a single document fetch"""
    url: str
    status_code: int
    html: str
    links: Set[str] = field(default_factory=set)


@dataclass
class CrawlResult:
    """Outcome of one site crawl job"""
    site_url: str
    pages_indexed: int = 0
    pages_failed: int = 0
    urls_visited: int = 0
    error: Optional[str] = None
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.cancelled

    def to_dict(self) -> dict:
        """Convert to dictionary for reporting"""
        return {
            'site_url': self.site_url,
            'pages_indexed': self.pages_indexed,
            'pages_failed': self.pages_failed,
            'urls_visited': self.urls_visited,
            'error': self.error,
            'cancelled': self.cancelled,
        }
