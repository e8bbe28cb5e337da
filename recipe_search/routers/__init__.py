"""
API routers for recipe search endpoints.
"""

from . import health_router, search_router

__all__ = ["search_router", "health_router"]
