"""
Core module: configuration, logging dan exception taxonomy
"""

from .config import ALL_SITES, BotIdentity, Settings, SiteConfig, load_sites, normalize_site_url, strip_www
from .exceptions import (
    SiteSearchError,
    AlreadyRunningError,
    NotRunningError,
    OutOfScopeError,
    FetchError,
    EmptyQueryError,
    NoSiteFilterError,
    UnknownSiteError,
    IndexingError,
)
from .logger import Logger

__all__ = [
    # Configuration
    'ALL_SITES',
    'BotIdentity',
    'Settings',
    'SiteConfig',
    'load_sites',
    'normalize_site_url',
    'strip_www',

    # Exceptions
    'SiteSearchError',
    'AlreadyRunningError',
    'NotRunningError',
    'OutOfScopeError',
    'FetchError',
    'EmptyQueryError',
    'NoSiteFilterError',
    'UnknownSiteError',
    'IndexingError',

    # Logging
    'Logger',
]
