"""
API module untuk site search service

Module ini berisi semua komponen API termasuk FastAPI app factory,
models, routes, service boundary, dan dependencies.
"""

from .app import create_app
from .models import (
    IndexingResponse,
    SearchItemModel,
    SearchResponse,
    TotalStatistics,
    DetailedStatisticsItem,
    StatisticsData,
    StatisticsResponse,
)
from .exceptions import ServicesNotInitialized, ApplicationStartupIncomplete
from .services import IndexingBoundary, SearchBoundary, StatisticsService
from .dependencies import AppState

__all__ = [
    # App factory
    'create_app',

    # Models
    'IndexingResponse',
    'SearchItemModel',
    'SearchResponse',
    'TotalStatistics',
    'DetailedStatisticsItem',
    'StatisticsData',
    'StatisticsResponse',

    # Exceptions
    'ServicesNotInitialized',
    'ApplicationStartupIncomplete',

    # Service boundary
    'IndexingBoundary',
    'SearchBoundary',
    'StatisticsService',

    # Dependencies
    'AppState',
]
