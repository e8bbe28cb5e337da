"""
Recipe search service.

Composes the query parser, the result cache and the search orchestrator
into the single entry point used by the HTTP layer and by other code:

    raw query -> QueryParser -> ResultCache -> SearchOrchestrator -> results
"""

import json
import time
from typing import Any, Iterable, List, Optional

import structlog

from ..cache.result_cache import ResultCache
from ..config import Settings, settings as default_settings
from ..domain.entities import SearchableCategory, SearchableRecord
from ..domain.exceptions import InvalidRecordException
from ..logging_config import clear_search_id, set_search_id
from ..metrics import track_search
from ..repositories.recipe_repository import IRecipeRepository
from ..search.fuzzy_matcher import FuzzyMatcher
from ..search.models import SearchFilters, SearchOptions, SearchQuery, SearchResult
from ..search.orchestrator import SearchOrchestrator
from ..search.query_parser import QueryParser
from ..search.relevance_scorer import CategoryScorer, RelevanceScorer

logger = structlog.get_logger(__name__)


class RecipeSearchService:
    """
    Free-text recipe search with result caching.

    The service owns its ResultCache. When built with a repository it
    subscribes to catalog changes and clears the cache on every mutation.
    """

    def __init__(
        self,
        repository: Optional[IRecipeRepository] = None,
        cache: Optional[ResultCache] = None,
        parser: Optional[QueryParser] = None,
        orchestrator: Optional[SearchOrchestrator] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize search service.

        Args:
            repository: Catalog used when search() is called without candidates
            cache: Result cache (default: a new cache sized from settings)
            parser: Query parser (default: Portuguese rule table)
            orchestrator: Ranking engine (default: built from settings)
            settings: Service configuration (default: global settings)
        """
        self.settings = settings or default_settings
        self.repository = repository
        self.cache = cache or ResultCache(
            max_size=self.settings.RESULT_CACHE_MAX_SIZE,
            default_ttl=self.settings.RESULT_CACHE_TTL_SECONDS,
        )
        self.parser = parser or QueryParser()
        self.orchestrator = orchestrator or self._build_orchestrator(self.settings)

        if repository is not None:
            repository.subscribe(self._on_catalog_changed)

    @staticmethod
    def _build_orchestrator(settings: Settings) -> SearchOrchestrator:
        matcher = FuzzyMatcher(threshold=settings.SIMILARITY_THRESHOLD)
        scorer = RelevanceScorer(
            matcher=matcher,
            highlight_open=settings.HIGHLIGHT_OPEN_TAG,
            highlight_close=settings.HIGHLIGHT_CLOSE_TAG,
            description_snippet_length=settings.DESCRIPTION_SNIPPET_LENGTH,
        )
        category_scorer = CategoryScorer(
            matcher=matcher,
            highlight_open=settings.HIGHLIGHT_OPEN_TAG,
            highlight_close=settings.HIGHLIGHT_CLOSE_TAG,
        )
        return SearchOrchestrator(scorer=scorer, category_scorer=category_scorer)

    def default_options(self) -> SearchOptions:
        return SearchOptions(
            max_results=self.settings.DEFAULT_MAX_RESULTS,
            min_score=self.settings.DEFAULT_MIN_SCORE,
        )

    def parse_query(self, raw_query: Optional[str]) -> SearchQuery:
        return self.parser.parse(raw_query)

    @staticmethod
    def cache_key(
        query: SearchQuery,
        options: SearchOptions,
        namespace: str = "",
        apply_filters: bool = False,
    ) -> str:
        """
        Build the result cache key.

        Args:
            query: Parsed query
            options: Search options
            namespace: Distinguishes different candidate collections searched
                through the same service
            apply_filters: Whether the implicit filters narrowed the candidates
        """
        key = f"{namespace}|{query.normalized_query}|{options.cache_key()}"
        if apply_filters:
            key += "|filters=" + json.dumps(
                query.filters.model_dump(exclude_none=True), sort_keys=True
            )
        return key

    def search(
        self,
        raw_query: Optional[str],
        candidates: Optional[Iterable[Any]] = None,
        options: Optional[SearchOptions] = None,
        namespace: str = "",
        apply_filters: bool = False,
    ) -> List[SearchResult[SearchableRecord]]:
        """
        Search recipes.

        Results are cached for repository searches and for explicit
        candidates passed with a namespace. The caller of a namespace promises
        that it always stands for the same collection. Explicit candidates
        without a namespace are ranked on every call.

        Args:
            raw_query: Query as typed by the user
            candidates: Recipes to rank; defaults to the repository catalog
            options: Result cap, score threshold and field boosts
            namespace: Cache key prefix for callers that search several
                candidate collections through one service
            apply_filters: Drop candidates that contradict the implicit
                filters of the query before ranking

        Returns:
            Ranked results, best first
        """
        search_id = set_search_id()
        start_time = time.perf_counter()
        query = self.parse_query(raw_query)
        options = options or self.default_options()
        cacheable = candidates is None or bool(namespace)
        computed = False

        def compute() -> List[SearchResult[SearchableRecord]]:
            nonlocal computed
            computed = True
            pool = self._candidates(candidates)
            if apply_filters:
                pool = self._filtered(pool, query.filters)
            return self.orchestrator.search(pool, query, options)

        try:
            if cacheable:
                results = self.cache.get_or_compute(
                    self.cache_key(query, options, namespace, apply_filters),
                    self.settings.RESULT_CACHE_TTL_SECONDS,
                    compute,
                )
            else:
                results = compute()
        except Exception:
            track_search("error", time.perf_counter() - start_time, 0)
            logger.exception("search_failed", search_id=search_id, query=query.original_query)
            raise
        finally:
            clear_search_id()

        duration = time.perf_counter() - start_time
        track_search("success", duration, len(results))
        self._log_analytics(search_id, query, results, cache_hit=not computed, duration=duration)
        return results

    def search_categories(
        self,
        raw_query: Optional[str],
        categories: Optional[Iterable[Any]] = None,
    ) -> List[SearchResult[SearchableCategory]]:
        """Search categories by name, description and keywords (uncached)."""
        query = self.parse_query(raw_query)
        if categories is None:
            categories = self.repository.list_categories() if self.repository else []
        return self.orchestrator.search_categories(categories, query)

    def invalidate(
        self,
        raw_query: Optional[str],
        options: Optional[SearchOptions] = None,
        namespace: str = "",
        apply_filters: bool = False,
    ) -> bool:
        """Drop the cached results of one query."""
        query = self.parse_query(raw_query)
        return self.cache.invalidate(
            self.cache_key(query, options or self.default_options(), namespace, apply_filters)
        )

    def clear_cache(self) -> int:
        return self.cache.clear()

    def get_stats(self) -> dict:
        return {
            "cache": self.cache.get_stats(),
            "scorer": self.orchestrator.scorer.get_stats(),
            "catalog_size": len(self.repository.list_recipes()) if self.repository else None,
        }

    def _candidates(self, candidates: Optional[Iterable[Any]]) -> Iterable[Any]:
        if candidates is not None:
            return candidates
        if self.repository is None:
            logger.warning("search_without_candidates")
            return []
        return self.repository.list_recipes()

    @staticmethod
    def _filtered(candidates: Iterable[Any], filters: SearchFilters) -> List[Any]:
        """
        Keep candidates that satisfy the filters.

        Entries that cannot be read as records are kept so the orchestrator
        skips and counts them.
        """
        if filters.is_empty():
            return list(candidates)

        kept = []
        for candidate in candidates:
            try:
                record = SearchableRecord.coerce(candidate)
            except InvalidRecordException:
                kept.append(candidate)
                continue
            if filters.matches(record):
                kept.append(record)
        return kept

    def _on_catalog_changed(self) -> None:
        cleared = self.cache.clear()
        logger.info("catalog_changed", cleared_entries=cleared)

    @staticmethod
    def _log_analytics(
        search_id: str,
        query: SearchQuery,
        results: List[SearchResult],
        cache_hit: bool,
        duration: float,
    ) -> None:
        avg_score = sum(r.score for r in results) / len(results) if results else 0.0
        logger.info(
            "search_completed",
            search_id=search_id,
            query=query.original_query,
            keywords=query.keywords,
            result_count=len(results),
            avg_score=round(avg_score, 4),
            cache_hit=cache_hit,
            latency_ms=round(duration * 1000, 2),
        )
