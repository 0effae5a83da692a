"""
Configuration management dari environment variables
"""
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ALL_SITES = "All"

# ``www.`` counts only as the first label of the host
WWW_PATTERN = re.compile(r'^((?:https?://)?)www\.', re.IGNORECASE)


def strip_www(url: str) -> str:
    """Drop a leading ``www.`` from the host of ``url``"""
    return WWW_PATTERN.sub(r'\1', url.strip(), count=1)


def normalize_site_url(url: str) -> str:
    """Strip the ``www.`` prefix and trailing slashes from a site URL"""
    return strip_www(url).rstrip("/")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SiteConfig:
    """One configured crawl target"""
    url: str
    name: str

    @classmethod
    def create(cls, url: str, name: Optional[str] = None) -> "SiteConfig":
        normalized = normalize_site_url(url)
        return cls(url=normalized, name=name or normalized)


@dataclass(frozen=True)
class BotIdentity:
    """Crawler identity sent with every request"""
    user_agent: str = "SiteSearchBot/1.0"
    referrer: str = "http://www.google.com"


@dataclass
class Settings:
    """Application settings"""

    # Storage
    database_path: str = "data/sitesearch.db"

    # Crawl targets and identity
    sites: List[SiteConfig] = field(default_factory=list)
    bot: BotIdentity = field(default_factory=BotIdentity)

    # Crawler tuning
    request_delay: float = 1.5
    batch_size: int = 1000
    crawl_workers: int = field(default_factory=lambda: os.cpu_count() or 4)
    request_timeout: int = 30
    max_retries: int = 3

    # Search
    search_limit: int = 20

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # API configuration
    api_title: str = "Site Search API"
    api_description: str = "Crawling, lemmatized indexing and ranked full-text search over configured sites"
    api_version: str = "1.0.0"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and ``.env``)"""
        load_dotenv()

        return cls(
            database_path=os.getenv("DATABASE_PATH", "data/sitesearch.db"),
            sites=load_sites(os.getenv("SITES"), os.getenv("SITES_FILE")),
            bot=BotIdentity(
                user_agent=os.getenv("USER_AGENT", BotIdentity.user_agent),
                referrer=os.getenv("REFERRER", BotIdentity.referrer),
            ),
            request_delay=float(os.getenv("REQUEST_DELAY", 1.5)),
            batch_size=int(os.getenv("BATCH_SIZE", 1000)),
            crawl_workers=int(os.getenv("CRAWL_WORKERS", os.cpu_count() or 4)),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", 30)),
            max_retries=int(os.getenv("MAX_RETRIES", 3)),
            search_limit=int(os.getenv("SEARCH_LIMIT", 20)),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
            reload=_env_bool("RELOAD", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )

    def find_site(self, url: str) -> Optional[SiteConfig]:
        """Return the configured site whose URL equals ``url``"""
        normalized = normalize_site_url(url)
        for site in self.sites:
            if site.url == normalized:
                return site
        return None

    def find_site_for_page(self, page_url: str) -> Optional[SiteConfig]:
        """Return the configured site that contains ``page_url``"""
        if not page_url or not page_url.strip():
            return None
        normalized = strip_www(page_url)
        for site in self.sites:
            if normalized == site.url or normalized.startswith(site.url + "/"):
                return site
        return None


def load_sites(raw: Optional[str] = None, path: Optional[str] = None) -> List[SiteConfig]:
    """Parse the site list from a JSON string or a JSON file.

    Both forms hold a list of ``{"url": ..., "name": ...}`` objects.
    """
    if raw:
        entries = json.loads(raw)
    elif path:
        with open(Path(path), "r", encoding="utf-8") as f:
            entries = json.load(f)
    else:
        return []

    sites = []
    seen = set()
    for entry in entries:
        if isinstance(entry, str):
            site = SiteConfig.create(entry)
        else:
            site = SiteConfig.create(entry["url"], entry.get("name"))
        if site.url in seen:
            logger.warning(f"Duplicate site {site.url} in configuration ignored")
            continue
        seen.add(site.url)
        sites.append(site)
    return sites
