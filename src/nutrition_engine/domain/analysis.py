"""Analyzed food and meal domain models."""

from dataclasses import dataclass

from nutrition_engine.domain.glycemic import GIResult, MealGI, MealGL
from nutrition_engine.domain.grading import CompleteGradingResult, WellnessFocus
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import ResolutionResult


@dataclass(frozen=True)
class AnalyzedFood:
    """Resolved and graded food item."""

    id: str
    name: str
    resolution: ResolutionResult
    grading: CompleteGradingResult
    gi: GIResult | None = None
    food_group: str | None = None
    is_beverage: bool = False

    @property
    def nutrition(self) -> NutrientVector:
        return self.resolution.nutrition


@dataclass(frozen=True)
class MealAnalysis:
    """Per-item analysis plus meal-level totals."""

    items: tuple[AnalyzedFood, ...]
    totals: NutrientVector
    meal_gi: MealGI | None
    meal_gl: MealGL | None
    confidence: float
    focus: WellnessFocus = WellnessFocus.BALANCED
