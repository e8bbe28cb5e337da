"""
Natural-language query parser.

Turns a raw query such as "bolo de chocolate fácil 30 min" into a
SearchQuery: keywords, numeric literals, implicit filters and alternative
query suggestions. Parsing never fails; empty input gives an empty query.
"""

import logging
import re
from typing import Any, List, Optional, Sequence, Union

from .filter_rules import DEFAULT_FILTER_RULES, FilterAccumulator, FilterRule
from .models import SearchFilters, SearchQuery
from .normalizer import normalize, tokenize

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")

# Portuguese articles, prepositions and conjunctions
STOP_WORDS = frozenset(
    {
        "de", "da", "do", "das", "dos", "com", "para", "em", "na", "no", "nas", "nos",
        "e", "ou", "a", "o", "um", "uma", "uns", "umas", "por", "pelo", "pela", "ao", "aos",
    }
)

# Common qualifiers offered as query refinements
QUALIFIER_PHRASES = (
    "receita de",
    "como fazer",
    "fácil",
    "rápido",
    "caseiro",
    "tradicional",
    "gourmet",
    "diet",
    "fitness",
    "vegano",
)

MIN_KEYWORD_LENGTH = 3
MIN_VARIANT_KEYWORD_LENGTH = 4
MAX_SUGGESTIONS = 5


class QueryParser:
    """
    Parse raw query strings into SearchQuery objects.

    The filter rule table, stop words and qualifier phrases are injectable
    so other locales can be supported by data alone.
    """

    def __init__(
        self,
        rules: Sequence[FilterRule] = DEFAULT_FILTER_RULES,
        stop_words: frozenset = STOP_WORDS,
        qualifier_phrases: Sequence[str] = QUALIFIER_PHRASES,
        max_suggestions: int = MAX_SUGGESTIONS,
    ):
        self.rules = tuple(rules)
        self.stop_words = stop_words
        self.qualifier_phrases = tuple(qualifier_phrases)
        self.max_suggestions = max_suggestions

    def parse(self, raw_query: Optional[Any]) -> SearchQuery:
        """
        Parse a raw query string.

        Args:
            raw_query: Query as typed by the user; None and non-strings are
                treated as an empty query

        Returns:
            Immutable SearchQuery
        """
        original = raw_query.strip() if isinstance(raw_query, str) else ""
        normalized = normalize(original)

        keywords = self.extract_keywords(normalized)
        numbers = self.extract_numbers(original)
        accumulator = self._run_rules(original)
        suggestions = self.generate_suggestions(normalized, keywords)

        query = SearchQuery(
            original_query=original,
            normalized_query=normalized,
            keywords=keywords,
            numbers=numbers,
            filters=accumulator.to_filters(),
            suggestions=suggestions,
            min_time_minutes=accumulator.min_time_minutes,
        )
        logger.debug(
            f"Parsed query '{original}': keywords={keywords}, numbers={numbers}, "
            f"filters={query.filters.model_dump(exclude_none=True)}"
        )
        return query

    def extract_keywords(self, normalized_query: str) -> List[str]:
        """Keep tokens of 3+ chars that are not stop words, in order."""
        return [
            token
            for token in tokenize(normalized_query)
            if len(token) >= MIN_KEYWORD_LENGTH and token not in self.stop_words
        ]

    @staticmethod
    def extract_numbers(text: str) -> List[Union[int, float]]:
        """
        Extract integer and decimal literals in order of appearance.

        Examples:
            "30 min"           -> [30]
            "2.5 kg, 4 ovos"   -> [2.5, 4]
        """
        numbers: List[Union[int, float]] = []
        for literal in NUMBER_PATTERN.findall(text or ""):
            numbers.append(float(literal) if "." in literal else int(literal))
        return numbers

    def extract_filters(self, text: str) -> SearchFilters:
        """Infer implicit filters from the original query text."""
        return self._run_rules(text).to_filters()

    def _run_rules(self, text: str) -> FilterAccumulator:
        accumulator = FilterAccumulator()
        lowered = (text or "").lower()
        if not lowered:
            return accumulator

        for rule in self.rules:
            if rule.apply(lowered, accumulator):
                logger.debug(f"Filter rule '{rule.name}' matched")
        return accumulator

    def generate_suggestions(self, normalized_query: str, keywords: List[str]) -> List[str]:
        """
        Propose alternative queries.

        First each qualifier phrase missing from the query is prepended,
        then keywords longer than 3 chars get a naive plural/singular toggle.
        The list is capped at max_suggestions in generation order.
        """
        if not normalized_query:
            return []

        suggestions: List[str] = []

        for phrase in self.qualifier_phrases:
            if normalize(phrase) not in normalized_query:
                suggestions.append(f"{phrase} {normalized_query}")

        for keyword in keywords:
            if len(keyword) < MIN_VARIANT_KEYWORD_LENGTH:
                continue
            variant = keyword[:-1] if keyword.endswith("s") else keyword + "s"
            suggestions.append(normalized_query.replace(keyword, variant, 1))

        return suggestions[: self.max_suggestions]
