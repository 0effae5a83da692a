"""
Routes untuk search
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from sitesearch.api.dependencies import get_search
from sitesearch.api.models import SearchResponse
from sitesearch.api.services import SearchBoundary
from sitesearch.api.utils import to_json_response
from sitesearch.core.config import ALL_SITES

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search", response_model=SearchResponse)
def search(
    query: str = Query(""),
    site: str = Query(ALL_SITES),
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=0),
    search_boundary: SearchBoundary = Depends(get_search),
):
    """Ranked full-text search over one site or all of them"""
    return to_json_response(search_boundary.search(query, site, offset, limit))
