"""
Search module for recipe search.

Provides query parsing, fuzzy matching, relevance scoring and ranking.
"""
from .fuzzy_matcher import FuzzyMatcher, fuzzy_contains, similarity
from .models import SearchFilters, SearchOptions, SearchQuery, SearchResult
from .normalizer import normalize
from .orchestrator import SearchOrchestrator
from .query_parser import QueryParser
from .relevance_scorer import CategoryScorer, RelevanceScorer

__all__ = [
    "CategoryScorer",
    "FuzzyMatcher",
    "QueryParser",
    "RelevanceScorer",
    "SearchFilters",
    "SearchOptions",
    "SearchOrchestrator",
    "SearchQuery",
    "SearchResult",
    "fuzzy_contains",
    "normalize",
    "similarity",
]
