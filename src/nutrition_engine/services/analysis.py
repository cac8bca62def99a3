"""Meal analysis combining resolution, glycemic lookup and grading."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from nutrition_engine.domain.analysis import AnalyzedFood, MealAnalysis
from nutrition_engine.domain.comparison import ComparisonResult
from nutrition_engine.domain.foods import NormalizedFoodDescriptor
from nutrition_engine.domain.glycemic import MealGlycemicItem
from nutrition_engine.domain.grading import WellnessFocus
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import ResolutionResult
from nutrition_engine.services.comparison import compare_foods
from nutrition_engine.services.glycemic import GlycemicLookup, has_relevant_gi
from nutrition_engine.services.grading import DeterministicGrader
from nutrition_engine.services.resolver import NutritionResolver

_BEVERAGE_PATTERN = re.compile(r"\b(juice|milk|tea|coffee|drink|soda)", re.IGNORECASE)

_logger = logging.getLogger(__name__)


def is_beverage(name: str) -> bool:
    return bool(_BEVERAGE_PATTERN.search(name))


@dataclass
class AnalysisService:
    """Resolve, grade and aggregate the foods of a meal."""

    resolver: NutritionResolver
    glycemic: GlycemicLookup
    grader: DeterministicGrader
    debug: bool = False

    async def analyze(
        self,
        descriptors: Sequence[NormalizedFoodDescriptor],
        focus: WellnessFocus = WellnessFocus.BALANCED,
    ) -> MealAnalysis:
        """Analyze every item and compute meal totals, GI and GL."""
        resolutions = await self.resolver.resolve_many(descriptors)
        items = tuple(
            self.analyze_resolved(f"item-{index + 1}", descriptor.name, resolution)
            for index, (descriptor, resolution) in enumerate(
                zip(descriptors, resolutions, strict=True)
            )
        )
        glycemic_items = [
            MealGlycemicItem(
                gi=item.gi.gi, gl=item.gi.gl, carbs_g=item.nutrition.carbs_g
            )
            for item in items
            if item.gi is not None
        ]
        meal_gi = self.glycemic.calculate_meal_gi(glycemic_items)
        meal_gl = (
            self.glycemic.calculate_meal_gl(glycemic_items) if glycemic_items else None
        )
        confidence = (
            sum(item.resolution.confidence for item in items) / len(items)
            if items
            else 0.0
        )
        if self.debug:
            _logger.info(
                "Meal analyzed: items=%s with_gi=%s confidence=%.2f",
                len(items),
                len(glycemic_items),
                confidence,
            )
        return MealAnalysis(
            items=items,
            totals=NutrientVector.total(item.nutrition for item in items),
            meal_gi=meal_gi,
            meal_gl=meal_gl,
            confidence=round(confidence, 4),
            focus=focus,
        )

    def analyze_resolved(
        self, item_id: str, name: str, resolution: ResolutionResult
    ) -> AnalyzedFood:
        """Grade an already resolved food, with GI when carbohydrate is relevant."""
        nutrition = resolution.nutrition
        food_group = self.glycemic.infer_category(name, nutrition).value
        gi = None
        if has_relevant_gi(nutrition):
            gi = self.glycemic.lookup(name, nutrition)
        beverage = is_beverage(name)
        grading = self.grader.grade(
            nutrition,
            resolution.serving_grams,
            food_group=food_group,
            is_beverage=beverage,
            gi=gi,
        )
        return AnalyzedFood(
            id=item_id,
            name=name,
            resolution=resolution,
            grading=grading,
            gi=gi,
            food_group=food_group,
            is_beverage=beverage,
        )

    async def compare(
        self,
        descriptors: Sequence[NormalizedFoodDescriptor],
        focus: WellnessFocus = WellnessFocus.BALANCED,
    ) -> ComparisonResult:
        """Analyze foods and rank them for the given focus."""
        if len(descriptors) < 2:
            raise ValueError("At least two foods are required for comparison")
        analysis = await self.analyze(descriptors, focus)
        return compare_foods(analysis.items, focus)
