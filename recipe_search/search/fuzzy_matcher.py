"""
Fuzzy matching engine for recipe search.

Provides typo-tolerant token comparison using Levenshtein distance and a
diacritic/case-insensitive substring test.
"""

import logging
from typing import Iterable, List

from rapidfuzz.distance import Levenshtein

from .normalizer import normalize

logger = logging.getLogger(__name__)


class FuzzyMatcher:
    """
    Fuzzy string matching for recipe fields.

    Two primitives:
    - similarity: 1 - levenshtein(a, b) / max(len(a), len(b))
    - fuzzy_contains: substring test after normalization
    """

    DEFAULT_THRESHOLD = 0.7

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        """
        Initialize fuzzy matcher.

        Args:
            threshold: Similarity a token must exceed to count as a near match (0-1)
        """
        self.threshold = threshold

    def similarity(self, a: str, b: str) -> float:
        """
        Calculate similarity between two already-normalized strings.

        Uses classic unit-cost Levenshtein distance over the raw strings.

        Returns:
            1.0 when both strings are empty, 0.0 when exactly one is empty,
            otherwise a value in [0, 1]
        """
        if not a and not b:
            return 1.0
        if not a or not b:
            return 0.0
        if a == b:
            return 1.0

        distance = Levenshtein.distance(a, b)
        return 1.0 - distance / max(len(a), len(b))

    def fuzzy_contains(self, haystack: str, needle: str) -> bool:
        """
        Check whether needle occurs in haystack ignoring case and diacritics.

        Examples:
            ("Bolo de Chocolate", "CHOCOLATE") -> True
            ("Pão de Queijo", "pao")           -> True
        """
        normalized_haystack = normalize(haystack)
        normalized_needle = normalize(needle)

        if not normalized_haystack or not normalized_needle:
            return False

        return normalized_needle in normalized_haystack

    def near_matches(self, tokens: Iterable[str], keyword: str) -> List[float]:
        """
        Similarities of every token that is a near match for keyword.

        Tokens whose similarity does not exceed the threshold are skipped.
        rapidfuzz's score cutoff lets it bail out early on pairs that cannot
        reach the threshold (e.g. large length differences); the values
        returned for kept tokens are unaffected.
        """
        if not keyword:
            return []

        matches = []
        for token in tokens:
            if not token:
                continue
            score = Levenshtein.normalized_similarity(
                token, keyword, score_cutoff=self.threshold
            )
            if score > self.threshold:
                matches.append(score)
        return matches

    def get_stats(self) -> dict:
        """Get matcher configuration."""
        return {
            "threshold": self.threshold,
            "algorithm": "levenshtein",
            "backend": "rapidfuzz",
        }


_default_matcher = FuzzyMatcher()


def similarity(a: str, b: str) -> float:
    """Module-level shortcut for FuzzyMatcher().similarity."""
    return _default_matcher.similarity(a, b)


def fuzzy_contains(haystack: str, needle: str) -> bool:
    """Module-level shortcut for FuzzyMatcher().fuzzy_contains."""
    return _default_matcher.fuzzy_contains(haystack, needle)
