"""
Storage module: SQLite schema, row models dan repositories
"""

from .db import Database
from .models import IndexEntry, Lemma, Page, Site, SiteStatus
from .repositories import IndexRepository, LemmaRepository, PageRepository, SiteRepository

__all__ = [
    # Database
    'Database',

    # Data models
    'Site',
    'SiteStatus',
    'Page',
    'Lemma',
    'IndexEntry',

    # Repositories
    'SiteRepository',
    'PageRepository',
    'LemmaRepository',
    'IndexRepository',
]
