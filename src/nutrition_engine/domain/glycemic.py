"""Glycemic index domain models."""

from dataclasses import dataclass
from enum import Enum


class GlycemicBand(str, Enum):
    """Low/medium/high classification for GI or GL."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GIMatchSource(str, Enum):
    """How a GI value was matched."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    CATEGORY = "category"


@dataclass(frozen=True)
class GIResult:
    """Glycemic index and load for a serving."""

    gi: int
    gl: int
    gi_band: GlycemicBand
    gl_band: GlycemicBand
    source: GIMatchSource
    confidence: float


@dataclass(frozen=True)
class MealGlycemicItem:
    """Per-item input for meal-level GI/GL aggregation."""

    gi: int
    gl: int
    carbs_g: float


@dataclass(frozen=True)
class MealGI:
    """Carbohydrate-weighted glycemic index for a meal."""

    gi: int
    gi_band: GlycemicBand


@dataclass(frozen=True)
class MealGL:
    """Summed glycemic load for a meal."""

    gl: int
    gl_band: GlycemicBand


class FoodCategory(str, Enum):
    """Coarse food grouping used for GI defaults and grading."""

    BREAD = "bread"
    CEREAL = "cereal"
    RICE = "rice"
    PASTA = "pasta"
    GRAIN = "grain"
    LEGUME = "legume"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    DAIRY = "dairy"
    FERMENTED = "fermented"
    MEAT = "meat"
    FISH = "fish"
    EGG = "egg"
    BEVERAGE = "beverage"
    SNACK = "snack"
    SWEETENER = "sweetener"
    MIXED_MEAL = "mixed_meal"
    OTHER = "other"


class ReferenceTier(str, Enum):
    """How well-established a reference GI value is."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class GIReference:
    """Published glycemic index for a named food."""

    name: str
    gi: int
    category: FoodCategory
    tier: ReferenceTier
    aliases: tuple[str, ...] = ()
