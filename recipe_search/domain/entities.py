"""
Domain entities for recipe search.

Read-only views of catalog entities exposing only what the search engine
needs. The catalog owns the records; the engine never mutates them.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Tuple

from .exceptions import InvalidRecordException


class DifficultyLevel(IntEnum):
    """Recipe difficulty levels."""

    EASY = 1
    MEDIUM = 2
    HARD = 3


class DietaryType(str, Enum):
    """Dietary labels recognised by the query parser."""

    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    KETO = "keto"
    PALEO = "paleo"
    LOW_CARB = "low_carb"


class MealType(str, Enum):
    """Meal types recognised by the query parser."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"
    DRINK = "drink"


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _names(items: Any) -> Tuple[str, ...]:
    """
    Collect display names from a list of strings or ``{"name": ...}`` objects.

    Entries without a usable name are dropped.
    """
    if not isinstance(items, Iterable) or isinstance(items, (str, bytes, Mapping)):
        return ()

    names = []
    for item in items:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, Mapping) and isinstance(item.get("name"), str):
            names.append(item["name"])
    return tuple(names)


def _strings(items: Any) -> Tuple[str, ...]:
    if not isinstance(items, Iterable) or isinstance(items, (str, bytes, Mapping)):
        return ()
    return tuple(str(item.value if isinstance(item, Enum) else item) for item in items)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a creation timestamp.

    Accepts datetimes, ISO-8601 strings (a trailing ``Z`` is read as UTC) and
    epoch milliseconds. Naive values are taken as UTC. Anything else gives None.
    """
    if value is None:
        return None

    parsed: Optional[datetime]
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class SearchableRecord:
    """
    Read-only view of a recipe for scoring.

    Attributes:
        id: Unique recipe identifier
        title: Recipe title
        description: Free-text description
        ingredients: Ingredient names
        tags: Tag names
        favorites: Popularity signal (number of users who favorited it)
        rating: Quality signal, average rating on a 0-5 scale
        created_at: Creation timestamp, used for the freshness boost
        total_time_minutes: Total preparation time when known
        difficulty: Difficulty level (1-3) when known
        dietary_types: Dietary labels of the recipe
        meal_types: Meal types the recipe is suited for
        category_id: Owning category identifier
    """

    id: str
    title: str = ""
    description: str = ""
    ingredients: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    favorites: int = 0
    rating: float = 0.0
    created_at: Optional[datetime] = None
    total_time_minutes: Optional[int] = None
    difficulty: Optional[int] = None
    dietary_types: Tuple[str, ...] = ()
    meal_types: Tuple[str, ...] = ()
    category_id: Optional[str] = None

    @property
    def ingredients_text(self) -> str:
        """Ingredient names joined for field matching."""
        return " ".join(self.ingredients)

    @property
    def tags_text(self) -> str:
        """Tag names joined for field matching."""
        return " ".join(self.tags)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "SearchableRecord":
        """
        Build a record from a decoded JSON object.

        Understands both the flat shape used by this service and the nested
        catalog shape (``stats.averageRating``, ``ingredients[].name``,
        ``timing.totalTime`` ...). Missing text fields become empty values.

        Raises:
            InvalidRecordException: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidRecordException(data, "expected a mapping")

        stats = data.get("stats") if isinstance(data.get("stats"), Mapping) else {}
        timing = data.get("timing") if isinstance(data.get("timing"), Mapping) else {}

        rating = data.get("rating", data.get("averageRating", stats.get("averageRating")))
        favorites = data.get("favorites", stats.get("favorites"))

        total_time = data.get("total_time_minutes", data.get("totalTime", timing.get("totalTime")))
        if total_time is None and timing:
            prep = timing.get("prepTime")
            cook = timing.get("cookTime")
            if prep is not None or cook is not None:
                total_time = _as_float(prep) + _as_float(cook)

        category_id = data.get("category_id", data.get("categoryId"))

        return cls(
            id=str(data.get("id", "")),
            title=_as_text(data.get("title")),
            description=_as_text(data.get("description")),
            ingredients=_names(data.get("ingredients")),
            tags=_names(data.get("tags")),
            favorites=int(_as_float(favorites)),
            rating=_as_float(rating),
            created_at=parse_timestamp(data.get("created_at", data.get("createdAt"))),
            total_time_minutes=_as_optional_int(total_time),
            difficulty=_as_optional_int(data.get("difficulty")),
            dietary_types=_strings(data.get("dietary_types", data.get("dietaryTypes"))),
            meal_types=_strings(data.get("meal_types", data.get("mealTypes"))),
            category_id=str(category_id) if category_id is not None else None,
        )

    @classmethod
    def coerce(cls, candidate: Any) -> "SearchableRecord":
        """
        Return candidate as a SearchableRecord.

        Raises:
            InvalidRecordException: If candidate is None, of an unsupported
                type or holds a value that cannot be converted
        """
        if isinstance(candidate, cls):
            return candidate
        if isinstance(candidate, Mapping):
            try:
                return cls.from_mapping(candidate)
            except (TypeError, ValueError, OverflowError, OSError) as e:
                raise InvalidRecordException(candidate, f"malformed field: {e}") from e
        raise InvalidRecordException(candidate, "unsupported candidate type")


@dataclass(frozen=True)
class SearchableCategory:
    """Read-only view of a recipe category for category search."""

    id: str
    name: str = ""
    description: str = ""
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "SearchableCategory":
        if not isinstance(data, Mapping):
            raise InvalidRecordException(data, "expected a mapping")
        return cls(
            id=str(data.get("id", "")),
            name=_as_text(data.get("name")),
            description=_as_text(data.get("description")),
            keywords=_names(data.get("keywords")),
        )

    @classmethod
    def coerce(cls, candidate: Any) -> "SearchableCategory":
        if isinstance(candidate, cls):
            return candidate
        if isinstance(candidate, Mapping):
            return cls.from_mapping(candidate)
        raise InvalidRecordException(candidate, "unsupported category type")
