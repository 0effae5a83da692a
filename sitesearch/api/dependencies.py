"""
FastAPI dependencies untuk validasi dan dependency injection
"""
from typing import Optional

from fastapi import Depends

from sitesearch.api.exceptions import ApplicationStartupIncomplete, ServicesNotInitialized
from sitesearch.api.services import IndexingBoundary, SearchBoundary, StatisticsService


class AppState:
    """Singleton untuk menyimpan state aplikasi"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.reset()
        return cls._instance

    def reset(self):
        self.indexing: Optional[IndexingBoundary] = None
        self.search: Optional[SearchBoundary] = None
        self.statistics: Optional[StatisticsService] = None
        self.app_startup_complete = False

    def set_services(self, indexing: IndexingBoundary, search: SearchBoundary, statistics: StatisticsService):
        self.indexing = indexing
        self.search = search
        self.statistics = statistics

    def set_startup_complete(self, status: bool):
        self.app_startup_complete = status

    def is_startup_complete(self) -> bool:
        return self.app_startup_complete


def get_app_state() -> AppState:
    """Dependency untuk mendapatkan app state"""
    return AppState()


def validate_startup_complete(app_state: AppState = Depends(get_app_state)) -> AppState:
    """Dependency untuk memvalidasi startup complete"""
    if not app_state.is_startup_complete():
        raise ApplicationStartupIncomplete()
    return app_state


def get_indexing(app_state: AppState = Depends(validate_startup_complete)) -> IndexingBoundary:
    if app_state.indexing is None:
        raise ServicesNotInitialized()
    return app_state.indexing


def get_search(app_state: AppState = Depends(validate_startup_complete)) -> SearchBoundary:
    if app_state.search is None:
        raise ServicesNotInitialized()
    return app_state.search


def get_statistics(app_state: AppState = Depends(validate_startup_complete)) -> StatisticsService:
    if app_state.statistics is None:
        raise ServicesNotInitialized()
    return app_state.statistics
