"""
Configuration settings for the crawler
"""

import os
from dataclasses import dataclass, field
from typing import List

from sitesearch.core.config import Settings


@dataclass
class CrawlConfig:
    """Configuration class for crawler settings"""
    # Basic crawling settings
    request_delay: float = 1.5
    max_retries: int = 3
    timeout: int = 30
    max_workers: int = field(default_factory=lambda: os.cpu_count() or 4)

    # Pages held in memory before they are flushed to the index
    batch_size: int = 1000

    # Link filtering
    max_url_length: int = 500
    excluded_patterns: List[str] = field(default_factory=lambda: [
        r'utm_',                # UTM parameters
        r'fbclid=',             # Facebook click IDs
        r'gclid=',              # Google click IDs
        r'/feed/?$',            # RSS feeds
        r'/wp-admin/',          # WordPress admin
        r'/wp-includes/',       # WordPress includes
        r'/cdn-cgi/',           # Cloudflare endpoints
        r'/login/?$',           # Auth pages
        r'/logout/?$',
    ])

    @classmethod
    def from_settings(cls, settings: Settings) -> "CrawlConfig":
        return cls(
            request_delay=settings.request_delay,
            max_retries=settings.max_retries,
            timeout=settings.request_timeout,
            max_workers=settings.crawl_workers,
            batch_size=settings.batch_size,
        )
