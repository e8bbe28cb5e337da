"""
Relevance scoring system for recipe search results.

Scores a recipe against a parsed query with an additive model:
field matches weighted by per-field boosts, an exact title phrase bonus,
a popularity boost from the average rating and a freshness boost for
recipes created in the last 30 days.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..domain.entities import SearchableCategory, SearchableRecord
from .fuzzy_matcher import FuzzyMatcher
from .highlighter import highlight, truncate
from .models import SearchQuery, SearchResult
from .normalizer import normalize, tokenize

logger = logging.getLogger(__name__)

FieldBoosts = Mapping[str, float]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RelevanceScorer:
    """
    Calculate relevance scores for recipes.

    Scoring factors (summed, never capped):
    1. Field matches - per keyword +1.0 for a substring hit, +0.5 * similarity
       per near-duplicate token, +0.3 per keyword when several keywords hit
       the same field; multiplied by the field boost
    2. Exact phrase - +2.0 when the whole query occurs in the title
    3. Popularity - up to +0.5 from the average rating
    4. Recency - up to +0.3, decaying linearly to 0 over 30 days
    """

    DEFAULT_BOOSTS: Dict[str, float] = {
        "title": 3.0,
        "description": 1.0,
        "ingredients": 2.0,
        "tags": 1.5,
    }

    EXACT_KEYWORD_SCORE = 1.0
    NEAR_MATCH_WEIGHT = 0.5
    MULTI_MATCH_BONUS = 0.3
    EXACT_PHRASE_BONUS = 2.0
    POPULARITY_WEIGHT = 0.5
    RECENCY_WEIGHT = 0.3
    RECENCY_WINDOW_DAYS = 30

    RATING_SCALE = 5.0
    HIGH_RATING = 4.5
    POPULAR_FAVORITES = 100
    MAX_INGREDIENT_SNIPPETS = 3

    def __init__(
        self,
        matcher: Optional[FuzzyMatcher] = None,
        highlight_open: str = "<mark>",
        highlight_close: str = "</mark>",
        description_snippet_length: int = 150,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize relevance scorer.

        Args:
            matcher: Fuzzy matcher used for near-duplicate token credit
            highlight_open: Marker inserted before highlighted keywords
            highlight_close: Marker inserted after highlighted keywords
            description_snippet_length: Description length kept in snippets
            clock: Returns the current time for the recency boost
        """
        self.matcher = matcher or FuzzyMatcher()
        self.highlight_open = highlight_open
        self.highlight_close = highlight_close
        self.description_snippet_length = description_snippet_length
        self.clock = clock

    def score(
        self,
        record: SearchableRecord,
        query: SearchQuery,
        boosts: Optional[FieldBoosts] = None,
        now: Optional[datetime] = None,
    ) -> SearchResult[SearchableRecord]:
        """
        Calculate the relevance of one recipe.

        Args:
            record: Recipe to score
            query: Parsed query
            boosts: Per-field weights; a field missing from a supplied map weighs 1
            now: Reference time for the recency boost (defaults to the clock)

        Returns:
            SearchResult with score and explanation data
        """
        weights = self.DEFAULT_BOOSTS if boosts is None else boosts
        keywords = query.keywords

        total = 0.0
        matched_fields: List[str] = []

        for field_name, text in self._field_texts(record).items():
            field_score, contained = self._calculate_field_score(normalize(text), keywords)
            total += field_score * weights.get(field_name, 1.0)
            if contained:
                matched_fields.append(field_name)

        exact_phrase = self.matcher.fuzzy_contains(record.title, query.original_query)
        if exact_phrase:
            total += self.EXACT_PHRASE_BONUS

        total += self.popularity_boost(record)
        recency = self.recency_boost(record, now)
        total += recency

        matching_ingredients = self._matching_names(record.ingredients, keywords)

        return SearchResult(
            item=record,
            score=total,
            matched_fields=matched_fields,
            highlighted_snippets=self._generate_snippets(
                record, matched_fields, keywords, matching_ingredients
            ),
            relevance_factors=self._relevance_factors(
                record, query, exact_phrase, recency, matching_ingredients
            ),
        )

    def _field_texts(self, record: SearchableRecord) -> Dict[str, str]:
        return {
            "title": record.title or "",
            "description": record.description or "",
            "ingredients": record.ingredients_text,
            "tags": record.tags_text,
        }

    def _calculate_field_score(
        self, normalized_text: str, keywords: List[str]
    ) -> Tuple[float, List[str]]:
        """
        Score one normalized field against the keywords.

        Returns:
            Tuple of (raw field score, distinct keywords contained in the field)
        """
        if not normalized_text or not keywords:
            return 0.0, []

        tokens = tokenize(normalized_text)
        score = 0.0
        contained: List[str] = []

        for keyword in keywords:
            if keyword in normalized_text:
                score += self.EXACT_KEYWORD_SCORE
                if keyword not in contained:
                    contained.append(keyword)

            for similarity in self.matcher.near_matches(tokens, keyword):
                score += similarity * self.NEAR_MATCH_WEIGHT

        if len(contained) > 1:
            score += len(contained) * self.MULTI_MATCH_BONUS

        return score, contained

    def popularity_boost(self, record: SearchableRecord) -> float:
        """Up to POPULARITY_WEIGHT, proportional to rating / 5."""
        normalized = max(0.0, min(record.rating / self.RATING_SCALE, 1.0))
        return normalized * self.POPULARITY_WEIGHT

    def recency_boost(self, record: SearchableRecord, now: Optional[datetime] = None) -> float:
        """
        Up to RECENCY_WEIGHT for brand-new recipes, 0 from 30 days on.

        Records without a creation time get no boost. Creation times in the
        future count as age 0.
        """
        if record.created_at is None:
            return 0.0

        reference = now or self.clock()
        created_at = record.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)

        days = max(0.0, (reference - created_at).total_seconds() / 86400)
        window = self.RECENCY_WINDOW_DAYS
        return max(0.0, (window - days) / window) * self.RECENCY_WEIGHT

    def _matching_names(self, names, keywords: List[str]) -> List[str]:
        return [
            name
            for name in names
            if any(self.matcher.fuzzy_contains(name, keyword) for keyword in keywords)
        ]

    def _highlight(self, text: str, keywords: List[str]) -> str:
        return highlight(text, keywords, self.highlight_open, self.highlight_close)

    def _generate_snippets(
        self,
        record: SearchableRecord,
        matched_fields: List[str],
        keywords: List[str],
        matching_ingredients: List[str],
    ) -> Dict[str, str]:
        snippets: Dict[str, str] = {}

        if "title" in matched_fields:
            snippets["title"] = self._highlight(record.title, keywords)

        if "description" in matched_fields:
            description = truncate(record.description, self.description_snippet_length)
            snippets["description"] = self._highlight(description, keywords)

        if "ingredients" in matched_fields and matching_ingredients:
            names = matching_ingredients[: self.MAX_INGREDIENT_SNIPPETS]
            snippets["ingredients"] = self._highlight(", ".join(names), keywords)

        if "tags" in matched_fields:
            tags = self._matching_names(record.tags, keywords)
            if tags:
                snippets["tags"] = self._highlight(", ".join(tags), keywords)

        return snippets

    def _relevance_factors(
        self,
        record: SearchableRecord,
        query: SearchQuery,
        exact_phrase: bool,
        recency: float,
        matching_ingredients: List[str],
    ) -> List[str]:
        factors: List[str] = []

        if exact_phrase:
            factors.append("Exact title match")

        if record.rating >= self.HIGH_RATING:
            factors.append("Highly rated")

        if record.favorites > self.POPULAR_FAVORITES:
            factors.append("Popular with users")

        if recency > 0:
            factors.append("Recently added")

        if len(matching_ingredients) > 1:
            factors.append(f"{len(matching_ingredients)} matching ingredients")

        if (
            query.min_time_minutes is not None
            and record.total_time_minutes is not None
            and record.total_time_minutes >= query.min_time_minutes
        ):
            factors.append("Matches longer preparation preference")

        return factors

    def get_stats(self) -> dict:
        """Get scorer configuration."""
        return {
            "boosts": dict(self.DEFAULT_BOOSTS),
            "weights": {
                "exact_phrase": self.EXACT_PHRASE_BONUS,
                "popularity": self.POPULARITY_WEIGHT,
                "recency": self.RECENCY_WEIGHT,
            },
            "recency_window_days": self.RECENCY_WINDOW_DAYS,
            "similarity_threshold": self.matcher.threshold,
        }


class CategoryScorer:
    """
    Score recipe categories against a parsed query.

    Scoring: +3 when a keyword occurs in the name, +1 when one occurs in
    the description, +0.5 per category keyword that contains a query keyword.
    """

    NAME_SCORE = 3.0
    DESCRIPTION_SCORE = 1.0
    KEYWORD_SCORE = 0.5

    def __init__(
        self,
        matcher: Optional[FuzzyMatcher] = None,
        highlight_open: str = "<mark>",
        highlight_close: str = "</mark>",
    ):
        self.matcher = matcher or FuzzyMatcher()
        self.highlight_open = highlight_open
        self.highlight_close = highlight_close

    def _any_keyword(self, text: str, keywords: List[str]) -> bool:
        return any(self.matcher.fuzzy_contains(text, keyword) for keyword in keywords)

    def score(
        self, category: SearchableCategory, query: SearchQuery
    ) -> SearchResult[SearchableCategory]:
        keywords = query.keywords
        score = 0.0
        matched_fields: List[str] = []

        if self._any_keyword(category.name, keywords):
            score += self.NAME_SCORE
            matched_fields.append("name")

        if category.description and self._any_keyword(category.description, keywords):
            score += self.DESCRIPTION_SCORE
            matched_fields.append("description")

        keyword_hits = [k for k in category.keywords if self._any_keyword(k, keywords)]
        if keyword_hits:
            score += len(keyword_hits) * self.KEYWORD_SCORE
            matched_fields.append("keywords")

        return SearchResult(
            item=category,
            score=score,
            matched_fields=matched_fields,
            highlighted_snippets={
                "name": highlight(
                    category.name, keywords, self.highlight_open, self.highlight_close
                )
            },
        )
