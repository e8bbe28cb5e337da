"""
Shared dependencies for the application.

Provides dependency injection functions used across routers.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .services.search_service import RecipeSearchService

# Service instance (set by the app lifespan, overridden in tests)
_search_service: Optional["RecipeSearchService"] = None


def set_search_service(service: Optional["RecipeSearchService"]) -> None:
    """
    Set the search service instance.

    Called by the app during startup and cleared on shutdown.
    """
    global _search_service
    _search_service = service


async def get_search_service() -> "RecipeSearchService":
    """
    Get search service instance for dependency injection.

    Raises:
        RuntimeError: If the app has not initialized the service
    """
    if _search_service is None:
        raise RuntimeError("Search service not initialized")
    return _search_service
