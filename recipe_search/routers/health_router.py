"""
Health check and monitoring router.

Provides endpoints for health checks and service statistics.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ..dependencies import get_search_service
from ..services.search_service import RecipeSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    service: str = "recipe-search"
    version: str = "1.0.0"


class StatsResponse(BaseModel):
    """Search engine statistics."""

    cache: dict
    scorer: dict
    catalog_size: Optional[int] = None
    timestamp: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint - returns 200 if service is running",
)
async def health_check():
    """Always returns 200 OK if the service is running."""
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Search statistics",
    description="Result cache counters, scorer configuration and catalog size",
)
async def stats(service: RecipeSearchService = Depends(get_search_service)):
    return StatsResponse(**service.get_stats(), timestamp=datetime.now(timezone.utc).isoformat())
