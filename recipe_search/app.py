"""
Main FastAPI application.

This file wires together all layers:
- Domain: Recipe views and errors
- Repositories: Candidate supply
- Search: Parsing, matching, scoring and ranking
- Services: Cached search composition
- Routers: HTTP endpoints
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, settings as default_settings
from .dependencies import set_search_service
from .domain.exceptions import RecipeSearchException
from .logging_config import setup_logging
from .metrics import metrics_endpoint
from .repositories.recipe_repository import InMemoryRecipeRepository
from .routers import health_router, search_router
from .services.search_service import RecipeSearchService

logger = structlog.get_logger(__name__)


def create_search_service(settings: Settings) -> RecipeSearchService:
    """
    Build the search service from settings.

    Loads the catalog from RECIPES_PATH when configured, otherwise starts
    with an empty catalog.

    Raises:
        CatalogLoadException: If the configured catalog cannot be read
    """
    if settings.RECIPES_PATH:
        repository = InMemoryRecipeRepository.from_json_file(
            settings.RECIPES_PATH, settings.CATEGORIES_PATH
        )
    else:
        repository = InMemoryRecipeRepository()
        logger.warning("No RECIPES_PATH configured, starting with an empty catalog")

    return RecipeSearchService(repository=repository, settings=settings)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[RecipeSearchService] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Service configuration (default: global settings)
        service: Prebuilt search service; built from settings when omitted
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting recipe search service...")
        search_service = service or create_search_service(settings)
        set_search_service(search_service)
        logger.info("Recipe search service started", stats=search_service.get_stats())

        yield

        set_search_service(None)
        logger.info("Recipe search service stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Free-text recipe search with fuzzy matching and relevance ranking",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(RecipeSearchException)
    async def search_exception_handler(request: Request, exc: RecipeSearchException):
        logger.error("search_error", path=request.url.path, error=exc.message)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": exc.message, "details": exc.details},
        )

    app.include_router(health_router.router)
    app.include_router(search_router.router)
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)

    return app


app = create_app()
