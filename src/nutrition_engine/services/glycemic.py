"""Glycemic index lookup and meal aggregation."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrition_engine.domain.glycemic import (
    FoodCategory,
    GIMatchSource,
    GIReference,
    GIResult,
    GlycemicBand,
    MealGI,
    MealGL,
    MealGlycemicItem,
    ReferenceTier,
)
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.services.glycemic_reference import (
    CATEGORY_DEFAULT_GI,
    CATEGORY_KEYWORDS,
    GI_REFERENCE,
)

GI_LOW_MAX = 55
GI_MEDIUM_MAX = 69
GL_LOW_MAX = 10
GL_MEDIUM_MAX = 19
RELEVANT_CARBS_G = 5.0

_PREPARATION_WORDS = re.compile(
    r"\b(raw|fresh|cooked|boiled|baked|grilled|roasted|steamed|organic)\b"
)
_WHITESPACE = re.compile(r"\s+")
_FUZZY_MIN_SCORE = 0.5

_TIER_CONFIDENCE = {
    ReferenceTier.HIGH: 0.95,
    ReferenceTier.MEDIUM: 0.80,
    ReferenceTier.LOW: 0.65,
}
_SOURCE_FACTOR = {
    GIMatchSource.EXACT: 1.0,
    GIMatchSource.FUZZY: 0.85,
    GIMatchSource.CATEGORY: 0.60,
}

_GI_EXPLANATIONS = {
    GlycemicBand.LOW: "Low GI foods cause a slower, steadier rise in blood sugar",
    GlycemicBand.MEDIUM: "Medium GI foods cause a moderate rise in blood sugar",
    GlycemicBand.HIGH: "High GI foods cause a rapid spike in blood sugar",
}
_GL_EXPLANATIONS = {
    GlycemicBand.LOW: "This serving has a low glycemic load",
    GlycemicBand.MEDIUM: "This serving has a moderate glycemic load",
    GlycemicBand.HIGH: "This serving has a high glycemic load",
}


def gi_band(gi: int) -> GlycemicBand:
    if gi <= GI_LOW_MAX:
        return GlycemicBand.LOW
    if gi <= GI_MEDIUM_MAX:
        return GlycemicBand.MEDIUM
    return GlycemicBand.HIGH


def gl_band(gl: int) -> GlycemicBand:
    if gl <= GL_LOW_MAX:
        return GlycemicBand.LOW
    if gl <= GL_MEDIUM_MAX:
        return GlycemicBand.MEDIUM
    return GlycemicBand.HIGH


def normalize_food_name(name: str) -> str:
    """Lower-case a name and drop preparation words that do not change GI."""
    normalized = _WHITESPACE.sub(" ", name.lower().strip())
    normalized = _PREPARATION_WORDS.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def _contains_phrase(text: str, phrase: str) -> bool:
    """Whole-word containment, so "rice" does not match "licorice"."""
    return f" {phrase} " in f" {text} "


def has_relevant_gi(nutrition: NutrientVector) -> bool:
    """GI is only meaningful for servings with at least 5 g of carbohydrate."""
    return nutrition.carbs_g >= RELEVANT_CARBS_G


def glycemic_load(gi: int, nutrition: NutrientVector) -> int:
    net_carbs = max(0.0, nutrition.carbs_g - nutrition.fiber_g)
    return round(gi * net_carbs / 100)


@dataclass
class GlycemicLookup:
    """Match foods to reference GI values and aggregate them per meal.

    Lookup order is exact name, the longest name or alias contained as
    whole words, fuzzy word overlap, then the default GI of the inferred
    food category.
    """

    references: Sequence[GIReference] = GI_REFERENCE
    category_defaults: dict[FoodCategory, int] = field(
        default_factory=lambda: dict(CATEGORY_DEFAULT_GI)
    )
    _by_name: dict[str, GIReference] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._by_name = {reference.name: reference for reference in self.references}

    def lookup(self, name: str, nutrition: NutrientVector) -> GIResult | None:
        """Return GI and GL for a serving, or None when GI does not apply."""
        if not has_relevant_gi(nutrition):
            return None
        normalized = normalize_food_name(name)
        match = self._match(normalized)
        if match is not None:
            reference, source = match
            gi = reference.gi
            tier = reference.tier
        else:
            category = self.infer_category(normalized, nutrition)
            default = self.category_defaults.get(category)
            if default is None:
                return None
            gi = default
            tier = ReferenceTier.LOW
            source = GIMatchSource.CATEGORY
        gl = glycemic_load(gi, nutrition)
        return GIResult(
            gi=gi,
            gl=gl,
            gi_band=gi_band(gi),
            gl_band=gl_band(gl),
            source=source,
            confidence=round(_TIER_CONFIDENCE[tier] * _SOURCE_FACTOR[source], 4),
        )

    def infer_category(self, name: str, nutrition: NutrientVector) -> FoodCategory:
        """Classify a food by reference match, name keywords, then nutrients."""
        normalized = normalize_food_name(name)
        match = self._match(normalized)
        if match is not None:
            return match[0].category
        padded = f" {normalized}"
        for category, keywords in CATEGORY_KEYWORDS:
            if any(keyword in padded for keyword in keywords):
                return category
        if nutrition.protein_g > 15 and nutrition.carbs_g < 10:
            return FoodCategory.OTHER
        if nutrition.carbs_g > 40:
            return FoodCategory.GRAIN
        if nutrition.sugar_g > 15 and nutrition.carbs_g > 20:
            return FoodCategory.FRUIT
        if nutrition.fiber_g > 5 and nutrition.carbs_g < 15:
            return FoodCategory.VEGETABLE
        return FoodCategory.OTHER

    def calculate_meal_gi(self, items: Sequence[MealGlycemicItem]) -> MealGI | None:
        """Carbohydrate-weighted GI; None when the meal has no carbohydrate."""
        weighted = [item for item in items if item.carbs_g > 0]
        total_carbs = sum(item.carbs_g for item in weighted)
        if total_carbs <= 0:
            return None
        gi = round(sum(item.gi * item.carbs_g for item in weighted) / total_carbs)
        return MealGI(gi=gi, gi_band=gi_band(gi))

    def calculate_meal_gl(self, items: Sequence[MealGlycemicItem]) -> MealGL:
        gl = sum(item.gl for item in items)
        return MealGL(gl=gl, gl_band=gl_band(gl))

    def explain(self, result: GIResult) -> str:
        gi_text = _GI_EXPLANATIONS[result.gi_band]
        return f"{gi_text}. {_GL_EXPLANATIONS[result.gl_band]}."

    def _match(self, normalized: str) -> tuple[GIReference, GIMatchSource] | None:
        if not normalized:
            return None
        reference = self._by_name.get(normalized)
        if reference is not None:
            return reference, GIMatchSource.EXACT
        phrase_matches = [
            (len(phrase), reference)
            for reference in self.references
            for phrase in (reference.name, *reference.aliases)
            if _contains_phrase(normalized, phrase)
        ]
        if phrase_matches:
            _, reference = max(phrase_matches, key=lambda match: match[0])
            return reference, GIMatchSource.EXACT
        fuzzy = self._fuzzy_match(normalized)
        if fuzzy is not None:
            return fuzzy, GIMatchSource.FUZZY
        return None

    def _fuzzy_match(self, normalized: str) -> GIReference | None:
        query_words = normalized.split()
        best: GIReference | None = None
        best_score = 0.0
        for reference in self.references:
            score = max(
                _overlap(query_words, candidate.split())
                for candidate in (reference.name, *reference.aliases)
            )
            if score > _FUZZY_MIN_SCORE and score > best_score:
                best = reference
                best_score = score
        return best


def _overlap(query_words: list[str], candidate_words: list[str]) -> float:
    if not query_words or not candidate_words:
        return 0.0
    matching = sum(
        1
        for word in query_words
        if any(word in other or other in word for other in candidate_words)
    )
    return matching / max(len(query_words), len(candidate_words))
