"""Tests for meal analysis."""

import asyncio

import pytest

from nutrition_engine.domain.foods import NormalizedFoodDescriptor
from nutrition_engine.domain.glycemic import GlycemicBand
from nutrition_engine.domain.grading import WellnessFocus
from nutrition_engine.domain.resolution import ResolutionSource
from nutrition_engine.services.analysis import AnalysisService, is_beverage
from nutrition_engine.services.glycemic import GlycemicLookup
from nutrition_engine.services.grading import DeterministicGrader
from tests.conftest import Sources, build_resolver, make_candidate

USDA = ResolutionSource.USDA


@pytest.fixture
def service(sources: Sources) -> AnalysisService:
    sources.usda.results["apple"] = make_candidate(
        USDA,
        0.95,
        serving_grams=182,
        calories=95,
        carbs_g=25,
        sugar_g=19,
        fiber_g=4.4,
        protein_g=0.5,
    )
    sources.usda.results["chicken breast"] = make_candidate(
        USDA, 0.9, calories=165, protein_g=31, fat_g=3.6, saturated_fat_g=1
    )
    sources.usda.results["orange juice"] = make_candidate(
        USDA, 0.9, serving_grams=250, calories=112, carbs_g=26, sugar_g=21
    )
    return AnalysisService(
        resolver=build_resolver(sources),
        glycemic=GlycemicLookup(),
        grader=DeterministicGrader(),
    )


def test_is_beverage_matches_word_starts() -> None:
    assert is_beverage("Orange Juice")
    assert is_beverage("iced tea")
    assert not is_beverage("steak")


def test_analyze_meal(service: AnalysisService) -> None:
    descriptors = [
        NormalizedFoodDescriptor(name="apple", estimated_grams=182),
        NormalizedFoodDescriptor(name="chicken breast", estimated_grams=100),
        NormalizedFoodDescriptor(name="orange juice", estimated_grams=250),
    ]

    analysis = asyncio.run(service.analyze(descriptors, WellnessFocus.HEART_HEALTH))

    apple, chicken, juice = analysis.items
    assert [item.id for item in analysis.items] == ["item-1", "item-2", "item-3"]
    assert apple.gi is not None
    assert apple.gi.gi == 36
    assert apple.gi.gl == 7
    assert apple.food_group == "fruit"
    assert chicken.gi is None
    assert chicken.food_group == "meat"
    assert juice.is_beverage
    assert juice.food_group == "beverage"
    assert juice.gi is not None
    assert juice.gi.gl == 13
    assert analysis.totals.calories == 372
    assert analysis.meal_gi is not None
    assert analysis.meal_gi.gi == 43
    assert analysis.meal_gi.gi_band == GlycemicBand.LOW
    assert analysis.meal_gl is not None
    assert analysis.meal_gl.gl == 20
    assert analysis.meal_gl.gl_band == GlycemicBand.HIGH
    assert analysis.confidence == 0.9167
    assert analysis.focus == WellnessFocus.HEART_HEALTH


def test_analyze_meal_without_carbohydrate(service: AnalysisService) -> None:
    analysis = asyncio.run(
        service.analyze(
            [NormalizedFoodDescriptor(name="chicken breast", estimated_grams=150)]
        )
    )

    assert analysis.meal_gi is None
    assert analysis.meal_gl is None
    assert analysis.items[0].nutrition.calories == 248


def test_low_carb_protein_gets_group_bonuses(
    service: AnalysisService, sources: Sources
) -> None:
    sources.usda.results["salmon fillet"] = make_candidate(
        USDA, 0.9, calories=208, protein_g=20, fat_g=13
    )
    sources.usda.results["plain yogurt"] = make_candidate(
        USDA, 0.9, calories=61, protein_g=3.5, carbs_g=4.7, sugar_g=4.7
    )
    descriptors = [
        NormalizedFoodDescriptor(name="chicken breast", estimated_grams=100),
        NormalizedFoodDescriptor(name="salmon fillet", estimated_grams=100),
        NormalizedFoodDescriptor(name="plain yogurt", estimated_grams=100),
    ]

    chicken, salmon, yogurt = asyncio.run(service.analyze(descriptors)).items

    muscle = chicken.grading.focus_grades[WellnessFocus.MUSCLE_BUILDING]
    assert "Complete amino acid profile" in muscle.pros
    assert salmon.food_group == "fish"
    assert salmon.gi is None
    brain = salmon.grading.focus_grades[WellnessFocus.BRAIN_FOCUS]
    assert brain.score > (
        DeterministicGrader()
        .grade(salmon.nutrition, 100)
        .focus_grades[WellnessFocus.BRAIN_FOCUS]
        .score
    )
    assert yogurt.food_group == "fermented"
    assert yogurt.gi is None
    gut = yogurt.grading.focus_grades[WellnessFocus.GUT_HEALTH]
    assert "Fermented - live probiotics" in gut.pros


def test_compare_through_service(service: AnalysisService) -> None:
    comparison = asyncio.run(
        service.compare(
            [
                NormalizedFoodDescriptor(name="apple", estimated_grams=182),
                NormalizedFoodDescriptor(name="chicken breast", estimated_grams=100),
            ],
            WellnessFocus.MUSCLE_BUILDING,
        )
    )

    assert comparison.winner.food_name == "chicken breast"
    assert len(comparison.foods) == 2


def test_compare_rejects_single_food(service: AnalysisService) -> None:
    with pytest.raises(ValueError):
        asyncio.run(
            service.compare([NormalizedFoodDescriptor(name="apple", estimated_grams=1)])
        )
