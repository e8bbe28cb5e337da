"""
Implicit filter rules for natural-language recipe queries.

Each rule pairs a regex with an effect on a FilterAccumulator. Rules are
evaluated in table order against the lower-cased original query, so new
vocabulary is added as a table row rather than a new branch.

Time ceiling and difficulty are single-valued: the last matching rule wins.
Dietary and meal types are multi-valued: every matching rule contributes.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern, Sequence

from ..domain.entities import DietaryType, DifficultyLevel, MealType
from .models import SearchFilters

QUICK_MAX_MINUTES = 30
SLOW_MIN_MINUTES = 60


@dataclass
class FilterAccumulator:
    """Mutable state collected while the rules run over one query."""

    max_time_minutes: Optional[int] = None
    min_time_minutes: Optional[int] = None
    difficulty: Optional[List[int]] = None
    dietary_types: List[str] = field(default_factory=list)
    meal_types: List[str] = field(default_factory=list)

    def to_filters(self) -> SearchFilters:
        return SearchFilters(
            max_time_minutes=self.max_time_minutes,
            difficulty=self.difficulty,
            dietary_types=self.dietary_types or None,
            meal_types=self.meal_types or None,
        )


Effect = Callable[["re.Match[str]", FilterAccumulator], None]


@dataclass(frozen=True)
class FilterRule:
    """One (matcher, effect) row of the rule table."""

    name: str
    pattern: Pattern[str]
    effect: Effect

    def apply(self, text: str, accumulator: FilterAccumulator) -> bool:
        """Run the effect if the pattern occurs in text. Returns whether it fired."""
        match = self.pattern.search(text)
        if match is None:
            return False
        self.effect(match, accumulator)
        return True


def max_time_from_group(multiplier: int = 1) -> Effect:
    """Set the time ceiling from the first captured number ("1.5 h" -> 90)."""

    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        acc.max_time_minutes = int(float(match.group(1)) * multiplier)

    return effect


def max_time(minutes: int) -> Effect:
    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        acc.max_time_minutes = minutes

    return effect


def min_time(minutes: int) -> Effect:
    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        acc.min_time_minutes = minutes

    return effect


def difficulty(level: DifficultyLevel) -> Effect:
    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        acc.difficulty = [int(level)]

    return effect


def dietary(kind: DietaryType) -> Effect:
    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        if kind.value not in acc.dietary_types:
            acc.dietary_types.append(kind.value)

    return effect


def meal(kind: MealType) -> Effect:
    def effect(match: "re.Match[str]", acc: FilterAccumulator) -> None:
        if kind.value not in acc.meal_types:
            acc.meal_types.append(kind.value)

    return effect


def _rule(name: str, pattern: str, effect: Effect) -> FilterRule:
    return FilterRule(name=name, pattern=re.compile(pattern), effect=effect)


DEFAULT_FILTER_RULES: Sequence[FilterRule] = (
    # Time
    _rule("minutes", r"(\d+(?:\.\d+)?)\s*min(?:utos?|s)?\b", max_time_from_group()),
    _rule("hours", r"(\d+(?:\.\d+)?)\s*(?:h|hrs?|horas?|hours?)\b", max_time_from_group(60)),
    _rule("quick", r"\br[áa]pid[oa]s?\b|\bquick\b|\bfast\b", max_time(QUICK_MAX_MINUTES)),
    _rule("slow", r"\bdemorad[oa]s?\b|\blent[oa]s?\b|\bslow\b", min_time(SLOW_MIN_MINUTES)),
    # Difficulty
    _rule(
        "easy",
        r"\bf[áa]cil\b|\bf[áa]ceis\b|\bsimples\b|\bb[áa]sic[oa]s?\b|\beasy\b",
        difficulty(DifficultyLevel.EASY),
    ),
    _rule(
        "medium",
        r"\bm[ée]dio\b|\bintermedi[áa]ri[oa]\b|\bmedium\b",
        difficulty(DifficultyLevel.MEDIUM),
    ),
    _rule(
        "hard",
        r"\bdif[íi]cil\b|\bavan[çc]ad[oa]s?\b|\bcomplicad[oa]s?\b|\bhard\b",
        difficulty(DifficultyLevel.HARD),
    ),
    # Dietary
    _rule("vegan", r"\bvegan[oa]?s?\b", dietary(DietaryType.VEGAN)),
    _rule("vegetarian", r"\bvegetarian[oa]?s?\b", dietary(DietaryType.VEGETARIAN)),
    _rule("gluten_free", r"sem gl[úu]ten|gluten[\s-]?free", dietary(DietaryType.GLUTEN_FREE)),
    _rule("dairy_free", r"sem lactose|dairy[\s-]?free", dietary(DietaryType.DAIRY_FREE)),
    _rule("keto", r"\bketo\b|\bcetog[êe]nic[oa]s?\b", dietary(DietaryType.KETO)),
    _rule("paleo", r"\bpaleo\b", dietary(DietaryType.PALEO)),
    _rule("low_carb", r"low[\s-]?carb|baixo carboidrato", dietary(DietaryType.LOW_CARB)),
    # Meal type
    _rule("breakfast", r"caf[ée] da manh[ãa]|\bbreakfast\b", meal(MealType.BREAKFAST)),
    _rule("lunch", r"\balmo[çc]o\b|\blunch\b", meal(MealType.LUNCH)),
    _rule("dinner", r"\bjantar\b|\bdinner\b", meal(MealType.DINNER)),
    _rule("snack", r"\blanches?\b|\bsnacks?\b", meal(MealType.SNACK)),
    _rule("dessert", r"\bsobremesas?\b|\bdesserts?\b", meal(MealType.DESSERT)),
    _rule("drink", r"\bbebidas?\b|\bdrinks?\b", meal(MealType.DRINK)),
)
