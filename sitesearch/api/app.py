"""
FastAPI application factory dan configuration
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitesearch.api.dependencies import AppState
from sitesearch.api.routes import indexing, search, statistics
from sitesearch.api.services import IndexingBoundary, SearchBoundary, StatisticsService
from sitesearch.core.config import Settings
from sitesearch.crawl.fetcher import DocumentFetcher
from sitesearch.indexing.lemmatizer import Lemmatizer
from sitesearch.indexing.service import IndexingService
from sitesearch.search.service import SearchService
from sitesearch.storage.db import Database

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, fetcher: Optional[DocumentFetcher] = None) -> FastAPI:
    """Factory function untuk membuat FastAPI app"""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan event handler untuk startup dan shutdown"""
        app_state = AppState()
        app_state.reset()

        logger.info(f"Opening database {settings.database_path}")
        db = Database(settings.database_path)
        db.setup()

        lemmatizer = Lemmatizer()
        indexing_service = IndexingService(settings, db, fetcher=fetcher, lemmatizer=lemmatizer)
        search_service = SearchService(settings, db, lemmatizer=lemmatizer)

        app_state.set_services(
            IndexingBoundary(indexing_service),
            SearchBoundary(search_service),
            StatisticsService(db, indexing_service),
        )
        app_state.set_startup_complete(True)
        logger.info(f"Serving search over {len(settings.sites)} configured sites")

        yield

        # Shutdown
        logger.info("Shutting down...")
        if indexing_service.is_indexing():
            try:
                indexing_service.stop_indexing()
            except Exception as e:
                logger.warning(f"Could not stop indexing cleanly: {e}")
            indexing_service.wait(timeout=30)
        app_state.reset()
        db.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(statistics.router)
    app.include_router(indexing.router)
    app.include_router(search.router)

    return app
