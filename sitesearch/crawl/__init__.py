"""
Crawl module: document fetching, link scope filtering dan concurrent site crawling
"""

from .config import CrawlConfig
from .crawler import SiteCrawler
from .fetcher import DocumentFetcher
from .models import CrawlResult, FetchedDocument
from .url_filter import LinkScopeFilter, is_in_scope

__all__ = [
    # Main crawler
    'SiteCrawler',

    # Configuration
    'CrawlConfig',

    # Data models
    'CrawlResult',
    'FetchedDocument',

    # Core components
    'DocumentFetcher',
    'LinkScopeFilter',
    'is_in_scope',
]
