"""
Routes untuk indexing control
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query

from sitesearch.api.dependencies import get_indexing
from sitesearch.api.models import IndexingResponse
from sitesearch.api.services import IndexingBoundary
from sitesearch.api.utils import to_json_response

router = APIRouter(prefix="/api", tags=["indexing"])


@router.get("/startIndexing", response_model=IndexingResponse)
def start_indexing(indexing: IndexingBoundary = Depends(get_indexing)):
    """Start a full crawl of every configured site"""
    return to_json_response(indexing.start_indexing())


@router.get("/stopIndexing", response_model=IndexingResponse)
def stop_indexing(indexing: IndexingBoundary = Depends(get_indexing)):
    """Stop the running crawl"""
    return to_json_response(indexing.stop_indexing())


@router.post("/indexPage", response_model=IndexingResponse)
def index_page(
    url: Optional[str] = Query(None),
    form_url: Optional[str] = Form(None, alias="url"),
    indexing: IndexingBoundary = Depends(get_indexing),
):
    """Refetch and reindex a single page; ``url`` comes from the query string or a form body"""
    return to_json_response(indexing.index_page(url or form_url or ""))
