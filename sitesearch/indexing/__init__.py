"""
Indexing module: lemmatization, inverted-index maintenance dan crawl orchestration
"""

from .indexer import IndexBuilder
from .lemmatizer import Lemmatizer, extract_title, strip_markup
from .service import IndexingPhase, IndexingService, IndexingState, STOPPED_BY_USER

__all__ = [
    # Orchestration
    'IndexingService',
    'IndexingState',
    'IndexingPhase',
    'STOPPED_BY_USER',

    # Index maintenance
    'IndexBuilder',

    # Text processing
    'Lemmatizer',
    'strip_markup',
    'extract_title',
]
