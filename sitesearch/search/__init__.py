"""
Search module: ranking dan snippet generation
"""

from .service import FREQUENCY_THRESHOLD, SearchItem, SearchResult, SearchService
from .snippets import SnippetBuilder

__all__ = [
    'SearchService',
    'SearchResult',
    'SearchItem',
    'SnippetBuilder',
    'FREQUENCY_THRESHOLD',
]
