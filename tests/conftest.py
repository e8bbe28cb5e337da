"""
Test configuration and fixtures
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from recipe_search.app import create_app
from recipe_search.cache.result_cache import ResultCache
from recipe_search.config import Settings
from recipe_search.domain.entities import SearchableCategory, SearchableRecord
from recipe_search.repositories.recipe_repository import InMemoryRecipeRepository
from recipe_search.search.orchestrator import SearchOrchestrator
from recipe_search.search.query_parser import QueryParser
from recipe_search.search.relevance_scorer import RelevanceScorer
from recipe_search.services.search_service import RecipeSearchService

NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def now():
    """Fixed reference time for recency calculations."""
    return NOW


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def parser():
    return QueryParser()


@pytest.fixture
def scorer():
    """Scorer whose clock is pinned to NOW."""
    return RelevanceScorer(clock=lambda: NOW)


@pytest.fixture
def orchestrator(scorer):
    return SearchOrchestrator(scorer=scorer)


@pytest.fixture
def result_cache(fake_clock):
    """Small cache driven by the fake clock."""
    return ResultCache(max_size=3, default_ttl=60.0, clock=fake_clock)


@pytest.fixture
def test_settings():
    """Settings isolated from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sample_recipes():
    """Small catalog covering title, ingredient and tag matches."""
    return [
        SearchableRecord(
            id="1",
            title="Bolo de Chocolate",
            description="Um bolo fofinho de chocolate para o café da tarde",
            ingredients=("farinha de trigo", "ovos", "chocolate em pó"),
            tags=("sobremesa", "doce"),
            favorites=150,
            rating=4.8,
            created_at=NOW - timedelta(days=5),
            total_time_minutes=50,
            difficulty=1,
            meal_types=("dessert",),
        ),
        SearchableRecord(
            id="2",
            title="Salada Verde",
            description="Folhas frescas com molho de limão",
            ingredients=("alface", "rúcula", "limão"),
            tags=("saudável",),
            rating=4.0,
            total_time_minutes=10,
            difficulty=1,
            dietary_types=("vegan", "vegetarian"),
        ),
        SearchableRecord(
            id="3",
            title="Bolo de Cenoura",
            description="Clássico bolo de cenoura com cobertura de chocolate",
            ingredients=("cenoura", "ovos", "açúcar", "chocolate"),
            tags=("sobremesa",),
            favorites=40,
            rating=4.2,
            total_time_minutes=60,
            difficulty=2,
        ),
    ]


@pytest.fixture
def sample_categories():
    return [
        SearchableCategory(
            id="c1",
            name="Sobremesas",
            description="Doces e bolos",
            keywords=("chocolate", "pudim"),
        ),
        SearchableCategory(id="c2", name="Saladas", description="Pratos leves"),
    ]


@pytest.fixture
def repository(sample_recipes, sample_categories):
    return InMemoryRecipeRepository(recipes=sample_recipes, categories=sample_categories)


@pytest.fixture
def search_service(repository, test_settings):
    return RecipeSearchService(repository=repository, settings=test_settings)


@pytest.fixture
def client(search_service, test_settings):
    """Test client wired to the sample catalog."""
    app = create_app(settings=test_settings, service=search_service)
    with TestClient(app) as test_client:
        yield test_client
