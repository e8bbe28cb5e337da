"""
Search orchestration over a candidate collection.

Scores every candidate, drops results below the minimum score, sorts by
score (stable, so equal scores keep the input order) and applies the
result cap. Holds no state between calls.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..domain.entities import SearchableCategory, SearchableRecord
from ..domain.exceptions import InvalidRecordException
from ..metrics import search_skipped_records_total
from .models import SearchOptions, SearchQuery, SearchResult
from .relevance_scorer import CategoryScorer, RelevanceScorer

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """Rank candidate recipes for a parsed query."""

    def __init__(
        self,
        scorer: Optional[RelevanceScorer] = None,
        category_scorer: Optional[CategoryScorer] = None,
    ):
        self.scorer = scorer or RelevanceScorer()
        self.category_scorer = category_scorer or CategoryScorer(matcher=self.scorer.matcher)

    def search(
        self,
        candidates: Iterable[Any],
        query: SearchQuery,
        options: Optional[SearchOptions] = None,
        now: Optional[datetime] = None,
    ) -> List[SearchResult[SearchableRecord]]:
        """
        Rank candidates against a query.

        Args:
            candidates: SearchableRecord instances or recipe mappings; entries
                that cannot be turned into a record are skipped
            query: Parsed query
            options: Result cap, score threshold and field boosts
            now: Reference time for the recency boost; fixed once per call so
                every candidate is scored against the same instant

        Returns:
            Results with score >= min_score, best first, at most max_results
        """
        options = options or SearchOptions()
        reference = now or self.scorer.clock()

        results: List[SearchResult[SearchableRecord]] = []
        skipped = 0

        for candidate in candidates:
            try:
                record = SearchableRecord.coerce(candidate)
            except InvalidRecordException as e:
                skipped += 1
                logger.warning(f"Skipping candidate: {e.message}")
                continue

            result = self.scorer.score(record, query, options.boosts, now=reference)
            if result.score >= options.min_score:
                results.append(result)

        if skipped:
            search_skipped_records_total.inc(skipped)

        # list.sort is stable, also with reverse=True
        results.sort(key=lambda r: r.score, reverse=True)

        logger.debug(
            f"Ranked {len(results)} results for '{query.original_query}' "
            f"(skipped={skipped}, cap={options.max_results})"
        )
        return results[: options.max_results]

    def search_categories(
        self, categories: Iterable[Any], query: SearchQuery
    ) -> List[SearchResult[SearchableCategory]]:
        """
        Rank categories against a query.

        Only categories with a positive score are returned.
        """
        results: List[SearchResult[SearchableCategory]] = []

        for candidate in categories:
            try:
                category = SearchableCategory.coerce(candidate)
            except InvalidRecordException as e:
                logger.warning(f"Skipping category: {e.message}")
                continue

            result = self.category_scorer.score(category, query)
            if result.score > 0:
                results.append(result)

        results.sort(key=lambda r: r.score, reverse=True)
        return results
