"""
Pydantic models untuk response API
"""
from typing import List, Optional

from pydantic import BaseModel


class IndexingResponse(BaseModel):
    result: bool
    error: Optional[str] = None


class SearchItemModel(BaseModel):
    site: str
    site_name: str
    uri: str
    title: str
    snippet: str
    relevance: float


class SearchResponse(BaseModel):
    result: bool
    count: int = 0
    data: List[SearchItemModel] = []
    error: Optional[str] = None


class TotalStatistics(BaseModel):
    sites: int
    pages: int
    lemmas: int
    indexing: bool


class DetailedStatisticsItem(BaseModel):
    url: str
    name: str
    status: str
    status_time: int
    error: str
    pages: int
    lemmas: int


class StatisticsData(BaseModel):
    total: TotalStatistics
    detailed: List[DetailedStatisticsItem]


class StatisticsResponse(BaseModel):
    result: bool
    statistics: Optional[StatisticsData] = None
    error: Optional[str] = None
