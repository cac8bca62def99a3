"""Tests for glycemic index lookup."""

import pytest

from nutrition_engine.domain.glycemic import (
    FoodCategory,
    GIMatchSource,
    GIReference,
    GlycemicBand,
    MealGlycemicItem,
    ReferenceTier,
)
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.services.glycemic import (
    GlycemicLookup,
    gi_band,
    gl_band,
    normalize_food_name,
)


@pytest.fixture
def lookup() -> GlycemicLookup:
    return GlycemicLookup()


def test_bands_use_inclusive_upper_bounds() -> None:
    assert gi_band(55) == GlycemicBand.LOW
    assert gi_band(56) == GlycemicBand.MEDIUM
    assert gi_band(69) == GlycemicBand.MEDIUM
    assert gi_band(70) == GlycemicBand.HIGH
    assert gl_band(10) == GlycemicBand.LOW
    assert gl_band(11) == GlycemicBand.MEDIUM
    assert gl_band(20) == GlycemicBand.HIGH


def test_normalize_drops_preparation_words() -> None:
    assert normalize_food_name("  Fresh   Organic Banana ") == "banana"


def test_exact_match_computes_load_from_net_carbs(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("Apple", NutrientVector(carbs_g=25, fiber_g=4))

    assert result is not None
    assert result.gi == 36
    assert result.gl == 8
    assert result.gi_band == GlycemicBand.LOW
    assert result.gl_band == GlycemicBand.LOW
    assert result.source == GIMatchSource.EXACT
    assert result.confidence == 0.95


def test_alias_match(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("raw bananas", NutrientVector(carbs_g=27))

    assert result is not None
    assert result.gi == 51
    assert result.source == GIMatchSource.EXACT


def test_aliases_match_whole_words_only() -> None:
    rice_only = GlycemicLookup(
        references=(
            GIReference(
                "white rice", 73, FoodCategory.RICE, ReferenceTier.HIGH, ("rice",)
            ),
        ),
        category_defaults={},
    )

    assert rice_only.lookup("licorice", NutrientVector(carbs_g=80)) is None
    plain = rice_only.lookup("rice", NutrientVector(carbs_g=28))
    assert plain is not None
    assert plain.gi == 73


def test_longest_contained_name_wins(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("brown rice pilaf", NutrientVector(carbs_g=30))

    assert result is not None
    assert result.gi == 68
    assert result.source == GIMatchSource.EXACT


def test_fuzzy_match_discounts_confidence(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("kidney bean salad", NutrientVector(carbs_g=20, fiber_g=6))

    assert result is not None
    assert result.gi == 24
    assert result.source == GIMatchSource.FUZZY
    assert result.confidence == 0.8075


def test_category_default_when_no_reference(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("plum compote", NutrientVector(carbs_g=30, sugar_g=25))

    assert result is not None
    assert result.gi == 45
    assert result.gl == 14
    assert result.source == GIMatchSource.CATEGORY
    assert result.confidence == 0.39


def test_no_gi_for_low_carb_or_unknown_category(lookup: GlycemicLookup) -> None:
    assert lookup.lookup("apple", NutrientVector(carbs_g=4)) is None
    steak = NutrientVector(carbs_g=6, protein_g=25)
    assert lookup.lookup("grilled steak", steak) is None


def test_infer_category_order(lookup: GlycemicLookup) -> None:
    assert lookup.infer_category("bagel", NutrientVector()) == FoodCategory.BREAD
    assert lookup.infer_category("veggie burrito", NutrientVector()) == (
        FoodCategory.MIXED_MEAL
    )
    assert lookup.infer_category("mystery mix", NutrientVector(carbs_g=50)) == (
        FoodCategory.GRAIN
    )
    fibrous = NutrientVector(fiber_g=8, carbs_g=9)
    assert lookup.infer_category("mystery mix", fibrous) == FoodCategory.VEGETABLE


def test_infer_protein_and_fermented_groups(lookup: GlycemicLookup) -> None:
    lean = NutrientVector(protein_g=25)

    assert lookup.infer_category("grilled chicken breast", lean) == FoodCategory.MEAT
    assert lookup.infer_category("tuna steak", lean) == FoodCategory.FISH
    assert lookup.infer_category("baked cod", lean) == FoodCategory.FISH
    assert lookup.infer_category("scrambled eggs", lean) == FoodCategory.EGG
    assert lookup.infer_category("veggie patty", lean) == FoodCategory.OTHER
    assert lookup.infer_category("kimchi", NutrientVector()) == (
        FoodCategory.FERMENTED
    )
    assert lookup.infer_category("greek yogurt", NutrientVector()) == (
        FoodCategory.FERMENTED
    )


def test_meal_gi_is_carb_weighted(lookup: GlycemicLookup) -> None:
    items = [
        MealGlycemicItem(gi=73, gl=29, carbs_g=40),
        MealGlycemicItem(gi=36, gl=8, carbs_g=20),
    ]

    meal_gi = lookup.calculate_meal_gi(items)
    meal_gl = lookup.calculate_meal_gl(items)

    assert meal_gi is not None
    assert meal_gi.gi == 61
    assert meal_gi.gi_band == GlycemicBand.MEDIUM
    assert meal_gl.gl == 37
    assert meal_gl.gl_band == GlycemicBand.HIGH


def test_meal_gi_without_carbs(lookup: GlycemicLookup) -> None:
    assert lookup.calculate_meal_gi([]) is None
    assert lookup.calculate_meal_gi([MealGlycemicItem(gi=50, gl=0, carbs_g=0)]) is None


def test_explain(lookup: GlycemicLookup) -> None:
    result = lookup.lookup("apple", NutrientVector(carbs_g=25, fiber_g=4))

    assert result is not None
    assert lookup.explain(result) == (
        "Low GI foods cause a slower, steadier rise in blood sugar. "
        "This serving has a low glycemic load."
    )
