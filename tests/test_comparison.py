"""Tests for food comparison."""

import pytest

from nutrition_engine.domain.analysis import AnalyzedFood
from nutrition_engine.domain.comparison import ComparisonMargin
from nutrition_engine.domain.grading import WellnessFocus
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import ResolutionResult, ResolutionSource
from nutrition_engine.services.comparison import compare_foods, compare_two, margin_for
from nutrition_engine.services.grading import DeterministicGrader

CHICKEN_BREAST = NutrientVector(
    calories=165, protein_g=31, fat_g=3.6, saturated_fat_g=1, sodium_mg=74
)
APPLE = NutrientVector(
    calories=95,
    carbs_g=25,
    sugar_g=19,
    fiber_g=4.4,
    protein_g=0.5,
    sodium_mg=2,
    vitamin_c_mg=8.4,
)


def _food(
    food_id: str, name: str, nutrition: NutrientVector, grams: float
) -> AnalyzedFood:
    return AnalyzedFood(
        id=food_id,
        name=name,
        resolution=ResolutionResult(
            nutrition=nutrition,
            source=ResolutionSource.USDA,
            confidence=0.9,
            serving_grams=grams,
        ),
        grading=DeterministicGrader().grade(nutrition, grams),
    )


@pytest.fixture
def chicken() -> AnalyzedFood:
    return _food("item-1", "Chicken breast", CHICKEN_BREAST, 100)


@pytest.fixture
def apple() -> AnalyzedFood:
    return _food("item-2", "Apple", APPLE, 182)


def test_margin_thresholds() -> None:
    assert margin_for(25) == ComparisonMargin.DECISIVE
    assert margin_for(24) == ComparisonMargin.MODERATE
    assert margin_for(15) == ComparisonMargin.MODERATE
    assert margin_for(5) == ComparisonMargin.SLIGHT
    assert margin_for(4) == ComparisonMargin.TIE


def test_compare_foods_ranks_every_focus(
    chicken: AnalyzedFood, apple: AnalyzedFood
) -> None:
    result = compare_foods([apple, chicken], WellnessFocus.BALANCED)

    assert result.focus == WellnessFocus.BALANCED
    assert result.winner.food_id == "item-1"
    assert result.winner.score == 80
    assert result.winner.margin == ComparisonMargin.MODERATE
    muscle = result.focus_winners[WellnessFocus.MUSCLE_BUILDING]
    assert muscle.food_name == "Chicken breast"
    assert muscle.margin == ComparisonMargin.DECISIVE
    assert set(result.focus_winners) == set(WellnessFocus)


def test_nutrient_comparison_direction_and_ties(
    chicken: AnalyzedFood, apple: AnalyzedFood
) -> None:
    result = compare_foods([chicken, apple])

    assert result.nutrient_comparison["protein_g"].leader == "item-1"
    assert result.nutrient_comparison["calories"].leader == "item-2"
    assert result.nutrient_comparison["fiber_g"].leader == "item-2"
    assert result.nutrient_comparison["trans_fat_g"].leader == "item-1"
    assert result.nutrient_comparison["calories"].values == {
        "item-1": 165.0,
        "item-2": 95.0,
    }


def test_equal_scores_keep_input_order(chicken: AnalyzedFood) -> None:
    twin = _food("item-2", "Chicken breast again", CHICKEN_BREAST, 100)

    result = compare_foods([chicken, twin])

    assert result.winner.food_id == "item-1"
    assert result.winner.margin == ComparisonMargin.TIE


def test_compare_requires_two_foods(chicken: AnalyzedFood) -> None:
    with pytest.raises(ValueError):
        compare_foods([chicken])


def test_compare_two_verdicts(chicken: AnalyzedFood, apple: AnalyzedFood) -> None:
    verdict = compare_two(chicken, apple, WellnessFocus.BALANCED)
    reverse = compare_two(apple, chicken, WellnessFocus.BALANCED)
    tie = compare_two(chicken, chicken, WellnessFocus.HEART_HEALTH)

    assert verdict.winner == "A"
    assert verdict.explanation == (
        "Chicken breast scores 19 points higher for balanced nutrition."
    )
    assert reverse.winner == "B"
    assert tie.winner == "tie"
    assert tie.explanation == (
        "Both Chicken breast and Chicken breast are similarly suited for heart health."
    )
