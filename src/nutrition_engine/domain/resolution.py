"""Resolution result and cache domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from nutrition_engine.domain.foods import FoodType
from nutrition_engine.domain.nutrients import NUTRIENT_FIELDS, NutrientVector


class ResolutionSource(str, Enum):
    """Where a resolved nutrient vector came from."""

    CACHE = "cache"
    USDA = "usda"
    OPENFOODFACTS = "openfoodfacts"
    EDAMAM = "edamam"
    HYBRID = "hybrid"
    DECOMPOSED = "decomposed"
    AI_FALLBACK = "ai_fallback"


def _check_confidence(confidence: float) -> None:
    if not 0 <= confidence <= 1:
        raise ValueError(f"confidence must be within [0, 1], got {confidence}")


@dataclass(frozen=True)
class ResolutionResult:
    """Nutrients for a serving plus provenance and confidence."""

    nutrition: NutrientVector
    source: ResolutionSource
    confidence: float
    serving_grams: float

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)


@dataclass(frozen=True)
class SourceCandidate:
    """Best match returned by a single nutrition source.

    ``reliable_fields`` lists the nutrients read directly off a label.
    ``None`` means the source reports every field.
    """

    nutrition: NutrientVector
    confidence: float
    serving_grams: float
    label: str
    source: ResolutionSource
    external_id: str | None = None
    reliable_fields: frozenset[str] | None = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)

    @property
    def unset_fields(self) -> frozenset[str]:
        """Return nutrients the source left unset."""
        if self.reliable_fields is None:
            return frozenset()
        return frozenset(NUTRIENT_FIELDS) - self.reliable_fields


@dataclass(frozen=True)
class CachedEntry:
    """Persisted resolution with TTL bookkeeping."""

    key: str
    nutrition: NutrientVector
    source: ResolutionSource
    confidence: float
    serving_grams: float
    cached_at: datetime
    expires_at: datetime
    hit_count: int = 0
    original_query: str = ""
    food_type: FoodType | None = None

    def is_expired(self, now: datetime) -> bool:
        """Return True once the entry is past its expiry."""
        return now > self.expires_at


@dataclass(frozen=True)
class CacheStats:
    """Aggregate view over the resolution cache."""

    total_entries: int
    expired_entries: int
    average_confidence: float
    total_hits: int
    by_source: dict[str, int] = field(default_factory=dict)
