"""
Routes untuk statistics
"""
from fastapi import APIRouter, Depends

from sitesearch.api.dependencies import get_statistics
from sitesearch.api.models import StatisticsResponse
from sitesearch.api.services import StatisticsService
from sitesearch.api.utils import to_json_response

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(statistics_service: StatisticsService = Depends(get_statistics)):
    """Per-site and total page/lemma counters"""
    return to_json_response(statistics_service.get_statistics())
