"""
Recipe repository interface and in-memory implementation.

The repository supplies candidate recipes to the search engine and tells
interested parties when the collection changes, so that cached search
results can be dropped.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Union

from ..domain.entities import SearchableCategory, SearchableRecord
from ..domain.exceptions import CatalogLoadException, InvalidRecordException

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class IRecipeRepository(ABC):
    """
    Abstract repository interface for the recipe catalog.

    Implementations must call notify listeners after every mutation.
    """

    @abstractmethod
    def list_recipes(self) -> List[SearchableRecord]:
        """
        Snapshot of all recipes.

        Returns:
            List of recipes in catalog order
        """
        pass

    @abstractmethod
    def list_categories(self) -> List[SearchableCategory]:
        """
        Snapshot of all categories.

        Returns:
            List of categories in catalog order
        """
        pass

    @abstractmethod
    def subscribe(self, listener: ChangeListener) -> None:
        """
        Register a callback invoked after every catalog mutation.

        Args:
            listener: Zero-argument callable
        """
        pass


class InMemoryRecipeRepository(IRecipeRepository):
    """Recipe catalog held in memory, optionally loaded from a JSON file."""

    def __init__(
        self,
        recipes: Optional[Iterable[Any]] = None,
        categories: Optional[Iterable[Any]] = None,
    ):
        self._recipes: List[SearchableRecord] = self._coerce_all(recipes or [])
        self._categories: List[SearchableCategory] = self._coerce_categories(categories or [])
        self._listeners: List[ChangeListener] = []
        self._lock = threading.Lock()

    @classmethod
    def from_json_file(
        cls,
        recipes_path: Union[str, Path],
        categories_path: Optional[Union[str, Path]] = None,
    ) -> "InMemoryRecipeRepository":
        """
        Load a catalog from JSON.

        The recipes file holds either a list of recipes or an object with
        "recipes" (and optionally "categories") lists.

        Raises:
            CatalogLoadException: If a file is missing or not valid JSON
        """
        data = _read_json(recipes_path)
        categories: Any = []

        if isinstance(data, Mapping):
            recipes = data.get("recipes", [])
            categories = data.get("categories", [])
        else:
            recipes = data

        if categories_path is not None:
            categories = _read_json(categories_path)

        if not isinstance(recipes, list) or not isinstance(categories, list):
            raise CatalogLoadException(str(recipes_path), "expected JSON lists")

        repository = cls(recipes=recipes, categories=categories)
        logger.info(
            f"Loaded {len(repository._recipes)} recipes and "
            f"{len(repository._categories)} categories from {recipes_path}"
        )
        return repository

    def list_recipes(self) -> List[SearchableRecord]:
        with self._lock:
            return list(self._recipes)

    def list_categories(self) -> List[SearchableCategory]:
        with self._lock:
            return list(self._categories)

    def get(self, recipe_id: str) -> Optional[SearchableRecord]:
        with self._lock:
            return next((r for r in self._recipes if r.id == recipe_id), None)

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def add(self, recipe: Any) -> SearchableRecord:
        """
        Add or replace a recipe (matched by id).

        Raises:
            InvalidRecordException: If recipe cannot be turned into a record
        """
        record = SearchableRecord.coerce(recipe)
        with self._lock:
            for index, existing in enumerate(self._recipes):
                if existing.id == record.id:
                    self._recipes[index] = record
                    break
            else:
                self._recipes.append(record)
        self._notify()
        return record

    def remove(self, recipe_id: str) -> bool:
        """
        Remove a recipe.

        Returns:
            True if a recipe was removed
        """
        with self._lock:
            before = len(self._recipes)
            self._recipes = [r for r in self._recipes if r.id != recipe_id]
            removed = len(self._recipes) != before
        if removed:
            self._notify()
        return removed

    def replace_all(self, recipes: Iterable[Any]) -> int:
        """
        Replace the whole recipe collection.

        Returns:
            Number of recipes now stored
        """
        records = self._coerce_all(recipes)
        with self._lock:
            self._recipes = records
        self._notify()
        return len(records)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    @staticmethod
    def _coerce_all(recipes: Iterable[Any]) -> List[SearchableRecord]:
        records = []
        for recipe in recipes:
            try:
                records.append(SearchableRecord.coerce(recipe))
            except InvalidRecordException as e:
                logger.warning(f"Ignoring catalog entry: {e.message}")
        return records

    @staticmethod
    def _coerce_categories(categories: Iterable[Any]) -> List[SearchableCategory]:
        result = []
        for category in categories:
            try:
                result.append(SearchableCategory.coerce(category))
            except InvalidRecordException as e:
                logger.warning(f"Ignoring category entry: {e.message}")
        return result


def _read_json(path: Union[str, Path]) -> Any:
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as e:
        raise CatalogLoadException(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise CatalogLoadException(str(path), f"invalid JSON: {e}") from e
