"""
Recipe search router.

Exposes free-text recipe search, query parsing and category search over
the catalog held by the search service.
"""

import time
from typing import Any, Dict, List, Optional, Union

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, ValidationError

from ..dependencies import get_search_service
from ..search.models import SearchOptions, SearchQuery
from ..services.search_service import RecipeSearchService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/search", tags=["search"])


class SearchResultItem(BaseModel):
    """One ranked recipe."""

    item: Dict[str, Any] = Field(..., description="Recipe fields")
    score: float = Field(..., description="Relevance score (no upper bound)")
    matched_fields: List[str] = Field(default_factory=list)
    highlighted_snippets: Dict[str, str] = Field(default_factory=dict)
    relevance_factors: List[str] = Field(default_factory=list)


class ParsedQueryResponse(BaseModel):
    """Structured intent extracted from a query."""

    original_query: str
    normalized_query: str
    keywords: List[str]
    numbers: List[Union[int, float]]
    filters: Dict[str, Any]
    suggestions: List[str]
    min_time_minutes: Optional[int] = None

    @classmethod
    def from_query(cls, query: SearchQuery) -> "ParsedQueryResponse":
        return cls(
            original_query=query.original_query,
            normalized_query=query.normalized_query,
            keywords=list(query.keywords),
            numbers=list(query.numbers),
            filters=query.filters.model_dump(exclude_none=True),
            suggestions=list(query.suggestions),
            min_time_minutes=query.min_time_minutes,
        )


class SearchResponse(BaseModel):
    """Search response."""

    success: bool = True
    query: ParsedQueryResponse
    results: List[SearchResultItem] = Field(default_factory=list)
    count: int = Field(..., description="Number of results")
    latency_ms: float = Field(..., description="Search latency in milliseconds")


class CategorySearchResponse(BaseModel):
    """Category search response."""

    success: bool = True
    query: str
    results: List[SearchResultItem] = Field(default_factory=list)
    count: int


class CacheClearResponse(BaseModel):
    success: bool = True
    cleared: int


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search recipes",
    description="""
    Free-text recipe search with fuzzy matching and relevance ranking.

    The query is parsed for keywords, numbers and implicit filters
    (e.g. "rápido" -> 30 minute ceiling, "vegano" -> vegan). Filters are
    returned as hints and only narrow the candidates when
    apply_filters is set.
    """,
)
async def search_recipes(
    q: str = Query(default="", max_length=200, description="Search query"),
    max_results: Optional[int] = Query(default=None, ge=1, le=200),
    min_score: Optional[float] = Query(default=None, ge=0),
    apply_filters: bool = Query(
        default=False,
        description="Rank only recipes that satisfy the implicit filters of the query",
    ),
    service: RecipeSearchService = Depends(get_search_service),
):
    start_time = time.perf_counter()

    query = service.parse_query(q)
    defaults = service.default_options()
    try:
        options = SearchOptions(
            max_results=max_results or defaults.max_results,
            min_score=defaults.min_score if min_score is None else min_score,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    results = service.search(q, options=options, apply_filters=apply_filters)
    latency_ms = (time.perf_counter() - start_time) * 1000

    logger.debug("search_request", query=q, count=len(results), latency_ms=latency_ms)

    return SearchResponse(
        query=ParsedQueryResponse.from_query(query),
        results=[SearchResultItem(**r.to_dict()) for r in results],
        count=len(results),
        latency_ms=round(latency_ms, 2),
    )


@router.get(
    "/parse",
    response_model=ParsedQueryResponse,
    summary="Parse a query",
    description="Return the keywords, numbers, implicit filters and suggestions of a query.",
)
async def parse_query(
    q: str = Query(default="", max_length=200),
    service: RecipeSearchService = Depends(get_search_service),
):
    return ParsedQueryResponse.from_query(service.parse_query(q))


@router.get(
    "/categories",
    response_model=CategorySearchResponse,
    summary="Search categories",
)
async def search_categories(
    q: str = Query(..., min_length=1, max_length=200),
    service: RecipeSearchService = Depends(get_search_service),
):
    results = service.search_categories(q)
    return CategorySearchResponse(
        query=q,
        results=[SearchResultItem(**r.to_dict()) for r in results],
        count=len(results),
    )


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear cached search results",
)
async def clear_cache(service: RecipeSearchService = Depends(get_search_service)):
    cleared = service.clear_cache()
    logger.info("cache_cleared", cleared=cleared)
    return CacheClearResponse(cleared=cleared)
