"""Cache module initialization."""

from recipe_search.cache.result_cache import CacheEntry, ResultCache

__all__ = ["CacheEntry", "ResultCache"]
