"""
Value objects passed between the search components.

SearchQuery and SearchFilters are produced once per raw query and never
modified afterwards. SearchResult wraps one scored candidate.
"""

import json
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.entities import SearchableRecord

T = TypeVar("T")


class SearchFilters(BaseModel):
    """
    Structured hints inferred from a free-text query.

    A field left as None means no constraint was inferred. Unknown keys are
    rejected at construction time.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_time_minutes: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[List[int]] = None
    dietary_types: Optional[List[str]] = None
    meal_types: Optional[List[str]] = None

    def is_empty(self) -> bool:
        """True when no filter was inferred."""
        return not self.model_dump(exclude_none=True)

    def matches(self, record: SearchableRecord) -> bool:
        """
        Check whether a record satisfies the inferred filters.

        The search engine never calls this; it exists for callers that want
        to enforce the hints. Record attributes that are unknown (None or
        empty) do not exclude the record. Every requested dietary type must
        be present; any requested meal type is enough.
        """
        if (
            self.max_time_minutes is not None
            and record.total_time_minutes is not None
            and record.total_time_minutes > self.max_time_minutes
        ):
            return False

        if self.difficulty and record.difficulty is not None:
            if record.difficulty not in self.difficulty:
                return False

        if self.dietary_types and record.dietary_types:
            if not set(self.dietary_types).issubset(record.dietary_types):
                return False

        if self.meal_types and record.meal_types:
            if not set(self.meal_types).intersection(record.meal_types):
                return False

        return True


class SearchQuery(BaseModel):
    """
    Parsed form of a raw search string.

    Attributes:
        original_query: Query as typed (trimmed)
        normalized_query: Normalized query text
        keywords: Normalized tokens longer than 2 chars, stop words removed
        numbers: Numeric literals of the original text, in order
        filters: Implicit filters inferred from the text
        suggestions: Up to 5 alternative query strings
        min_time_minutes: "Slow/long" preference; a ranking hint, not a filter
    """

    model_config = ConfigDict(frozen=True)

    original_query: str = ""
    normalized_query: str = ""
    keywords: List[str] = Field(default_factory=list)
    numbers: List[Union[int, float]] = Field(default_factory=list)
    filters: SearchFilters = Field(default_factory=SearchFilters)
    suggestions: List[str] = Field(default_factory=list)
    min_time_minutes: Optional[int] = None


class SearchOptions(BaseModel):
    """Options of one search call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_results: int = Field(default=50, ge=1)
    min_score: float = Field(default=0.1, ge=0)
    boosts: Optional[Dict[str, float]] = None

    @field_validator("boosts")
    @classmethod
    def validate_boosts(cls, value: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
        """
        Validate that field boosts are non-negative.

        Raises:
            ValueError: If a boost is negative
        """
        if value is None:
            return value
        for field_name, weight in value.items():
            if weight < 0:
                raise ValueError(f"Boost for '{field_name}' must be >= 0, got {weight}")
        return value

    def cache_key(self) -> str:
        """Stable serialization used as part of the result cache key."""
        return json.dumps(self.model_dump(), sort_keys=True, separators=(",", ":"))


def _serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {key: _serialize(item) for key, item in asdict(value).items()}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


@dataclass
class SearchResult(Generic[T]):
    """
    Container for one scored candidate.

    Attributes:
        item: The scored record
        score: Non-negative relevance score, no upper bound
        matched_fields: Fields where at least one keyword occurred
        highlighted_snippets: Field name -> text with highlighted keywords
        relevance_factors: Human-readable reasons for the score
    """

    item: T
    score: float
    matched_fields: List[str] = field(default_factory=list)
    highlighted_snippets: Dict[str, str] = field(default_factory=dict)
    relevance_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "item": _serialize(self.item),
            "score": round(self.score, 4),
            "matched_fields": list(self.matched_fields),
            "highlighted_snippets": dict(self.highlighted_snippets),
            "relevance_factors": list(self.relevance_factors),
        }
