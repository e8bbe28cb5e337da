"""
Tests for search orchestration: threshold, ordering and result cap.
"""

from datetime import timedelta

import pytest

from recipe_search.domain.entities import SearchableRecord
from recipe_search.search.models import SearchOptions


class TestRanking:
    """Test ordering of results."""

    def test_best_match_first(self, orchestrator, parser, sample_recipes, now):
        results = orchestrator.search(sample_recipes, parser.parse("bolo de chocolate"), now=now)

        assert [r.item.id for r in results][:2] == ["1", "3"]
        assert all(r.score > 0 for r in results)

    def test_scores_non_increasing(self, orchestrator, parser, sample_recipes, now):
        results = orchestrator.search(sample_recipes, parser.parse("bolo"), now=now)
        scores = [r.score for r in results]

        assert scores == sorted(scores, reverse=True)

    def test_title_match_beats_no_match(self, orchestrator, parser, now):
        """Test the classic "chocolate cake vs. salad" case."""
        records = [
            SearchableRecord(id="salad", title="Salada Verde"),
            SearchableRecord(id="cake", title="Bolo de Chocolate"),
        ]

        results = orchestrator.search(
            records,
            parser.parse("bolo de chocolate fácil"),
            SearchOptions(min_score=0),
            now=now,
        )

        assert [r.item.id for r in results] == ["cake", "salad"]
        assert results[0].score > results[1].score

    def test_equal_scores_keep_input_order(self, orchestrator, parser, now):
        records = [SearchableRecord(id=i, title="Bolo") for i in ("a", "b", "c")]
        query = parser.parse("bolo")

        forward = orchestrator.search(records, query, now=now)
        backward = orchestrator.search(list(reversed(records)), query, now=now)

        assert [r.item.id for r in forward] == ["a", "b", "c"]
        assert [r.item.id for r in backward] == ["c", "b", "a"]

    def test_empty_query_ranks_by_popularity_and_freshness(self, orchestrator, parser, now):
        records = [
            SearchableRecord(id="a", rating=3.0, created_at=now - timedelta(days=40)),
            SearchableRecord(id="b", rating=5.0, created_at=now - timedelta(days=40)),
            SearchableRecord(id="c", rating=1.0, created_at=now),
        ]

        results = orchestrator.search(records, parser.parse(""), now=now)

        assert [r.item.id for r in results] == ["b", "c", "a"]
        assert [r.score for r in results] == [
            pytest.approx(0.5),
            pytest.approx(0.4),
            pytest.approx(0.3),
        ]

    def test_deterministic(self, orchestrator, parser, sample_recipes, now):
        query = parser.parse("bolo chocolate ovos")

        first = orchestrator.search(sample_recipes, query, now=now)
        second = orchestrator.search(sample_recipes, query, now=now)

        assert [(r.item.id, r.score) for r in first] == [(r.item.id, r.score) for r in second]


class TestThresholdAndCap:
    """Test min_score and max_results."""

    def test_results_below_min_score_dropped(self, orchestrator, parser, now):
        records = [
            SearchableRecord(id="hit", title="Bolo"),
            SearchableRecord(id="miss", title="Salada"),
        ]

        results = orchestrator.search(records, parser.parse("bolo"), now=now)

        assert [r.item.id for r in results] == ["hit"]

    def test_every_result_meets_threshold(self, orchestrator, parser, sample_recipes, now):
        options = SearchOptions(min_score=5.0)

        results = orchestrator.search(sample_recipes, parser.parse("bolo"), options, now=now)

        assert results
        assert all(r.score >= 5.0 for r in results)

    def test_zero_min_score_keeps_everything(self, orchestrator, parser, sample_recipes, now):
        options = SearchOptions(min_score=0)

        results = orchestrator.search(sample_recipes, parser.parse("pudim"), options, now=now)

        assert len(results) == len(sample_recipes)

    def test_max_results(self, orchestrator, parser, now):
        records = [SearchableRecord(id=str(i), title="Bolo") for i in range(5)]

        results = orchestrator.search(
            records, parser.parse("bolo"), SearchOptions(max_results=2), now=now
        )

        assert [r.item.id for r in results] == ["0", "1"]

    def test_no_candidates(self, orchestrator, parser, now):
        assert orchestrator.search([], parser.parse("bolo"), now=now) == []


class TestCandidateHandling:
    """Test mixed and invalid candidates."""

    def test_invalid_candidates_skipped(self, orchestrator, parser, now):
        candidates = [None, 42, SearchableRecord(id="1", title="Bolo"), "bolo"]

        results = orchestrator.search(candidates, parser.parse("bolo"), now=now)

        assert [r.item.id for r in results] == ["1"]

    def test_mapping_candidates(self, orchestrator, parser, now):
        candidates = [{"id": 7, "title": "Bolo de Fubá", "stats": {"averageRating": 4.0}}]

        results = orchestrator.search(candidates, parser.parse("fuba"), now=now)

        assert len(results) == 1
        assert results[0].item.id == "7"
        assert results[0].item.rating == 4.0


    @pytest.mark.parametrize(
        "bad_fields",
        [
            {"favorites": "nan"},
            {"favorites": float("inf")},
            {"rating": "-inf"},
            {"createdAt": 10**20},
            {"created_at": float("nan")},
            {"timing": {"prepTime": "inf", "cookTime": 10}},
            {"difficulty": float("inf")},
        ],
    )
    def test_non_finite_values_do_not_abort_search(self, orchestrator, parser, now, bad_fields):
        """Test that out-of-range numbers fall back to empty values."""
        candidates = [
            SearchableRecord(id="good", title="Bolo de Milho"),
            {"id": "odd", "title": "Bolo de Fubá", **bad_fields},
        ]

        results = orchestrator.search(candidates, parser.parse("bolo"), now=now)

        assert {r.item.id for r in results} == {"good", "odd"}
        assert all(r.score >= 0 for r in results)

    def test_unconvertible_field_skips_only_that_record(self, orchestrator, parser, now):
        class BrokenId:
            def __str__(self):
                raise ValueError("no textual form")

        candidates = [
            {"id": BrokenId(), "title": "Bolo"},
            SearchableRecord(id="good", title="Bolo"),
        ]

        results = orchestrator.search(candidates, parser.parse("bolo"), now=now)

        assert [r.item.id for r in results] == ["good"]


class TestCategorySearch:
    """Test category ranking."""

    def test_only_positive_scores(self, orchestrator, parser, sample_categories):
        results = orchestrator.search_categories(sample_categories, parser.parse("chocolate"))

        assert [r.item.id for r in results] == ["c1"]

    def test_sorted_by_score(self, orchestrator, parser, sample_categories):
        results = orchestrator.search_categories(sample_categories, parser.parse("saladas bolos"))

        assert [r.item.id for r in results] == ["c2", "c1"]
