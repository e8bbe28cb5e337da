"""
Service layer - composes parsing, caching and ranking.
"""

from .search_service import RecipeSearchService

__all__ = ["RecipeSearchService"]
