"""
API routes module

Module ini berisi semua route handlers untuk API endpoints.
"""

from . import indexing, search, statistics

# Import routers untuk mudah diakses
from .indexing import router as indexing_router
from .search import router as search_router
from .statistics import router as statistics_router

__all__ = [
    # Modules
    'indexing',
    'search',
    'statistics',

    # Routers
    'indexing_router',
    'search_router',
    'statistics_router',
]
