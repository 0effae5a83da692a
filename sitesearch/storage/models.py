"""
Data models for the relational store
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class SiteStatus(str, Enum):
    INDEXING = "INDEXING"
    INDEXED = "INDEXED"
    FAILED = "FAILED"


@dataclass
class Site:
    """Crawl target identity record"""
    url: str
    name: str
    status: SiteStatus = SiteStatus.INDEXING
    status_time: datetime = field(default_factory=datetime.now)
    last_error: str = ""
    id: Optional[int] = None


@dataclass
class Page:
    """Fetched document owned by a site"""
    site_id: int
    path: str
    code: int
    content: str
    id: Optional[int] = None


@dataclass
class Lemma:
    """Site-scoped lemma; frequency is the number of pages containing it"""
    site_id: int
    lemma: str
    frequency: int = 0
    id: Optional[int] = None


@dataclass
class IndexEntry:
    """Inverted-index edge between a page and a lemma"""
    page_id: int
    lemma_id: int
    rank: float
    id: Optional[int] = None
