"""
Recipe search service.

Free-text search over a recipe catalog: natural-language query parsing,
fuzzy matching, weighted relevance ranking and a short-lived result cache.
"""

from .cache.result_cache import ResultCache
from .domain.entities import SearchableCategory, SearchableRecord
from .search.models import SearchFilters, SearchOptions, SearchQuery, SearchResult
from .services.search_service import RecipeSearchService

__all__ = [
    "RecipeSearchService",
    "ResultCache",
    "SearchFilters",
    "SearchOptions",
    "SearchQuery",
    "SearchResult",
    "SearchableCategory",
    "SearchableRecord",
]

__version__ = "1.0.0"
