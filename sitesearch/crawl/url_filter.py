"""
Link scope filtering: decide which discovered links belong to the crawled site
"""

import re
from typing import Optional, Set, Tuple
from urllib.parse import urlparse

from .config import CrawlConfig

PROTOCOL_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def strip_protocol(url: str) -> str:
    """Drop the scheme and a leading ``www.`` from a URL"""
    url = PROTOCOL_PATTERN.sub('', url.strip())
    if url.lower().startswith('www.'):
        url = url[4:]
    return url


def is_in_scope(url: str, site_url: str) -> bool:
    """Pure scope test for ``url`` against the site's base URL"""
    return LinkScopeFilter(site_url).is_in_scope(url)


class LinkScopeFilter:
    """Scope filtering for links discovered while crawling one site"""

    def __init__(self, site_url: str, config: Optional[CrawlConfig] = None):
        self.config = config or CrawlConfig()
        self.site_url = site_url
        self.host = strip_protocol(site_url).rstrip('/')

        host = re.escape(self.host)
        # Extensionless paths, or paths ending in .html; no query, fragment or encoded chars
        self.scope_pattern = re.compile(
            rf'{host}(?:/[^,.#&%?\s]*|/[^,#&%?\s]*\.html)',
            re.IGNORECASE,
        )
        self.excluded_patterns = [re.compile(p, re.IGNORECASE) for p in self.config.excluded_patterns]

    def is_in_scope(self, url: str) -> bool:
        """Check if URL is within the site and passes the path rules"""
        if not url or '#' in url:
            return False

        if len(url) > self.config.max_url_length:
            return False

        parsed = urlparse(url)
        if parsed.scheme and parsed.scheme not in ('http', 'https'):
            return False

        if not self.scope_pattern.fullmatch(strip_protocol(url)):
            return False

        for pattern in self.excluded_patterns:
            if pattern.search(url):
                return False

        return True

    def should_crawl_url(self, url: str, visited: Set[str]) -> Tuple[bool, str]:
        """Determine if URL should be crawled"""
        if not self.is_in_scope(url):
            return False, "out_of_scope"

        if self.to_path(url) in visited:
            return False, "already_visited"

        return True, "passed_all_filters"

    def to_path(self, url: str) -> str:
        """Site-relative path of an in-scope URL ("/" for the root)"""
        remainder = strip_protocol(url)[len(self.host):]
        return remainder or '/'
