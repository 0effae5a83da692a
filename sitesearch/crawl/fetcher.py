"""
Document fetcher: one HTTP GET per call with the configured bot identity
"""

import logging
import threading
from typing import Optional, Set
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from sitesearch.core.config import BotIdentity
from sitesearch.core.exceptions import FetchError

from .config import CrawlConfig
from .models import FetchedDocument

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class DocumentFetcher:
    """Fetch HTML documents and their outbound links"""

    def __init__(self, bot: Optional[BotIdentity] = None, config: Optional[CrawlConfig] = None):
        self.bot = bot or BotIdentity()
        self.config = config or CrawlConfig()
        self.logger = logging.getLogger(__name__)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """Per-thread session with retry strategy"""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=self.config.max_retries,
                backoff_factor=1,
                status_forcelist=[429, 500, 502, 503, 504],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            session.headers.update({
                'User-Agent': self.bot.user_agent,
                'Referer': self.bot.referrer,
            })
            self._local.session = session
        return session

    def fetch(self, url: str) -> FetchedDocument:
        """GET ``url`` and return status code, HTML and absolute outbound links"""
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise FetchError(url, f"HTTP {response.status_code}", status_code=response.status_code)

        content_type = response.headers.get('Content-Type', '').lower()
        if content_type and not content_type.startswith(HTML_CONTENT_TYPES):
            raise FetchError(url, f"not an HTML document ({content_type})", status_code=response.status_code)

        # requests falls back to ISO-8859-1 when the server omits a charset
        if 'charset' not in content_type:
            response.encoding = response.apparent_encoding

        html = response.text
        try:
            soup = BeautifulSoup(html, 'html.parser')
        except Exception as e:
            raise FetchError(url, f"malformed HTML: {e}", status_code=response.status_code) from e

        return FetchedDocument(
            url=response.url or url,
            status_code=response.status_code,
            html=html,
            links=self._extract_links_from_soup(soup, response.url or url),
        )

    def _extract_links_from_soup(self, soup: BeautifulSoup, base_url: str) -> Set[str]:
        """Extract and normalize links from BeautifulSoup object"""
        links = set()

        for element in soup.find_all(href=True):
            href = element['href'].strip()
            if not href:
                continue

            absolute_url = urljoin(base_url, href)
            parsed = urlparse(absolute_url)

            if parsed.scheme in ('http', 'https') and parsed.netloc:
                links.add(absolute_url)

        return links
