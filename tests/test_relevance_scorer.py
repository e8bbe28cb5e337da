"""
Tests for relevance scoring.
"""

from datetime import timedelta

import pytest

from recipe_search.domain.entities import SearchableCategory, SearchableRecord
from recipe_search.search.relevance_scorer import CategoryScorer, RelevanceScorer


class TestFieldScoring:
    """Test keyword credit per field."""

    def test_title_match_with_multi_keyword_bonus(self, scorer, parser, now):
        """
        Two keywords in the title: 2 x (1.0 exact + 0.5 near) + 2 x 0.3 bonus,
        times the title boost of 3.
        """
        record = SearchableRecord(id="1", title="Bolo de Chocolate")

        result = scorer.score(record, parser.parse("bolo chocolate"), now=now)

        assert result.score == pytest.approx(10.8)
        assert result.matched_fields == ["title"]

    def test_exact_phrase_bonus(self, scorer, parser, now):
        record = SearchableRecord(id="1", title="Bolo de Chocolate")

        result = scorer.score(record, parser.parse("Bolo de Chocolate"), now=now)

        assert result.score == pytest.approx(12.8)
        assert "Exact title match" in result.relevance_factors

    def test_single_keyword_in_description(self, scorer, parser, now):
        record = SearchableRecord(id="1", description="Um bolo fofinho")

        result = scorer.score(record, parser.parse("bolo"), now=now)

        assert result.score == pytest.approx(1.5)
        assert result.matched_fields == ["description"]

    def test_near_match_without_exact_hit(self, scorer, parser, now):
        """Test that a typo earns only near-match credit."""
        record = SearchableRecord(id="1", title="Bolo de Chocolat")

        result = scorer.score(record, parser.parse("chocolate"), now=now)

        assert result.score == pytest.approx(8 / 9 * 0.5 * 3)
        assert result.matched_fields == []

    def test_more_keyword_hits_score_higher(self, scorer, parser, now):
        query = parser.parse("bolo chocolate")
        one_hit = SearchableRecord(id="1", title="Bolo de Cenoura")
        two_hits = SearchableRecord(id="2", title="Bolo de Chocolate")

        assert (
            scorer.score(two_hits, query, now=now).score
            > scorer.score(one_hit, query, now=now).score
        )

    def test_missing_fields_score_zero(self, scorer, parser, now):
        result = scorer.score(SearchableRecord(id="x"), parser.parse("bolo"), now=now)

        assert result.score == 0.0
        assert result.matched_fields == []
        assert result.highlighted_snippets == {}


class TestBoosts:
    """Test per-field boost handling."""

    def test_default_boosts(self, scorer, parser, now):
        record = SearchableRecord(id="1", ingredients=("ovos",))

        result = scorer.score(record, parser.parse("ovos"), now=now)

        assert result.score == pytest.approx(3.0)

    def test_missing_field_in_custom_boosts_weighs_one(self, scorer, parser, now):
        record = SearchableRecord(id="1", ingredients=("ovos",))

        result = scorer.score(record, parser.parse("ovos"), boosts={"title": 3.0}, now=now)

        assert result.score == pytest.approx(1.5)

    def test_custom_title_boost(self, scorer, parser, now):
        """Test title boost with the exact phrase bonus unaffected."""
        record = SearchableRecord(id="1", title="Bolo")
        query = parser.parse("bolo")

        assert scorer.score(record, query, now=now).score == pytest.approx(6.5)
        assert scorer.score(record, query, boosts={"title": 1.0}, now=now).score == (
            pytest.approx(3.5)
        )

    def test_zero_boost_drops_field(self, scorer, parser, now):
        record = SearchableRecord(id="1", description="bolo")

        result = scorer.score(record, parser.parse("bolo"), boosts={"description": 0}, now=now)

        assert result.score == 0.0
        assert result.matched_fields == ["description"]


class TestPopularityAndRecency:
    """Test the popularity and freshness boosts."""

    @pytest.mark.parametrize(
        "rating,expected",
        [(5.0, 0.5), (2.5, 0.25), (0.0, 0.0), (7.0, 0.5), (-1.0, 0.0)],
    )
    def test_popularity_boost(self, scorer, rating, expected):
        record = SearchableRecord(id="1", rating=rating)

        assert scorer.popularity_boost(record) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "age_days,expected",
        [(0, 0.3), (15, 0.15), (30, 0.0), (45, 0.0), (-10, 0.3)],
    )
    def test_recency_boost(self, scorer, now, age_days, expected):
        """Test linear decay; future creation times count as brand new."""
        record = SearchableRecord(id="1", created_at=now - timedelta(days=age_days))

        assert scorer.recency_boost(record, now) == pytest.approx(expected)

    def test_no_creation_time(self, scorer, now):
        assert scorer.recency_boost(SearchableRecord(id="1"), now) == 0.0

    def test_clock_used_when_now_omitted(self, scorer, now):
        record = SearchableRecord(id="1", created_at=now)

        assert scorer.recency_boost(record) == pytest.approx(0.3)

    def test_empty_query_ranks_by_signals(self, scorer, parser, now):
        record = SearchableRecord(id="1", title="Bolo", rating=5.0, created_at=now)

        result = scorer.score(record, parser.parse(""), now=now)

        assert result.score == pytest.approx(0.8)
        assert result.matched_fields == []


class TestSnippets:
    """Test highlighted snippet generation."""

    def test_title_snippet(self, scorer, parser, now):
        record = SearchableRecord(id="1", title="Bolo de Chocolate")

        result = scorer.score(record, parser.parse("bolo chocolate"), now=now)

        assert result.highlighted_snippets == {
            "title": "<mark>Bolo</mark> de <mark>Chocolate</mark>"
        }

    def test_accented_text_highlighted(self, scorer, parser, now):
        record = SearchableRecord(id="1", title="Pão Fácil")

        result = scorer.score(record, parser.parse("facil"), now=now)

        assert result.highlighted_snippets["title"] == "Pão <mark>Fácil</mark>"

    def test_ingredient_snippet(self, scorer, parser, now):
        record = SearchableRecord(
            id="1", ingredients=("farinha de trigo", "ovos", "chocolate em pó")
        )

        result = scorer.score(record, parser.parse("chocolate ovos"), now=now)

        assert result.score == pytest.approx(7.2)
        assert result.highlighted_snippets["ingredients"] == (
            "<mark>ovos</mark>, <mark>chocolate</mark> em pó"
        )
        assert "2 matching ingredients" in result.relevance_factors

    def test_description_truncated(self, scorer, parser, now):
        record = SearchableRecord(id="1", description="bolo " * 40)

        snippet = scorer.score(record, parser.parse("bolo"), now=now).highlighted_snippets[
            "description"
        ]

        assert snippet.endswith("...")
        assert "<mark>bolo</mark>" in snippet

    def test_custom_markers(self, parser, now):
        scorer = RelevanceScorer(highlight_open="**", highlight_close="**")
        record = SearchableRecord(id="1", title="Bolo")

        result = scorer.score(record, parser.parse("bolo"), now=now)

        assert result.highlighted_snippets["title"] == "**Bolo**"


class TestRelevanceFactors:
    """Test human-readable ranking reasons."""

    def test_all_signals(self, scorer, parser, now):
        record = SearchableRecord(
            id="1", title="Bolo", rating=4.8, favorites=150, created_at=now
        )

        factors = scorer.score(record, parser.parse("Bolo"), now=now).relevance_factors

        assert factors == [
            "Exact title match",
            "Highly rated",
            "Popular with users",
            "Recently added",
        ]

    def test_longer_preparation_preference(self, scorer, parser, now):
        query = parser.parse("assado lento")
        slow = SearchableRecord(id="1", title="Pernil assado", total_time_minutes=90)
        fast = SearchableRecord(id="2", title="Frango assado", total_time_minutes=20)

        assert "Matches longer preparation preference" in scorer.score(
            slow, query, now=now
        ).relevance_factors
        assert "Matches longer preparation preference" not in scorer.score(
            fast, query, now=now
        ).relevance_factors

    def test_get_stats(self, scorer):
        stats = scorer.get_stats()

        assert stats["boosts"]["title"] == 3.0
        assert stats["recency_window_days"] == 30


class TestCategoryScorer:
    """Test category scoring."""

    def test_description_and_keywords(self, parser):
        category = SearchableCategory(
            id="c1",
            name="Sobremesas",
            description="Doces e bolos",
            keywords=("chocolate", "pudim"),
        )

        result = CategoryScorer().score(category, parser.parse("bolo de chocolate"))

        assert result.score == pytest.approx(1.5)
        assert result.matched_fields == ["description", "keywords"]

    def test_name_match(self, parser):
        category = SearchableCategory(id="c1", name="Saladas")

        result = CategoryScorer().score(category, parser.parse("salada"))

        assert result.score == pytest.approx(3.0)
        assert result.highlighted_snippets["name"] == "<mark>Salada</mark>s"
