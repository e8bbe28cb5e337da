"""
Repository layer - supplies recipe candidates to the search engine.
"""

from .recipe_repository import IRecipeRepository, InMemoryRecipeRepository

__all__ = ["IRecipeRepository", "InMemoryRecipeRepository"]
