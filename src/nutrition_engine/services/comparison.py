"""Deterministic ranking of analyzed foods."""

from collections.abc import Sequence

from nutrition_engine.domain.analysis import AnalyzedFood
from nutrition_engine.domain.comparison import (
    ComparisonMargin,
    ComparisonResult,
    ComparisonWinner,
    HeadToHead,
    NutrientLeader,
)
from nutrition_engine.domain.grading import WellnessFocus
from nutrition_engine.domain.nutrients import NUTRIENT_FIELDS

LOWER_IS_BETTER = frozenset(
    {
        "calories",
        "sodium_mg",
        "sugar_g",
        "saturated_fat_g",
        "trans_fat_g",
        "cholesterol_mg",
    }
)
TIE_THRESHOLD = 5

FOCUS_LABELS: dict[WellnessFocus, str] = {
    WellnessFocus.BALANCED: "balanced nutrition",
    WellnessFocus.MUSCLE_BUILDING: "building muscle",
    WellnessFocus.HEART_HEALTH: "heart health",
    WellnessFocus.ENERGY_ENDURANCE: "energy and endurance",
    WellnessFocus.WEIGHT_MANAGEMENT: "weight management",
    WellnessFocus.BRAIN_FOCUS: "brain health and focus",
    WellnessFocus.GUT_HEALTH: "gut health",
    WellnessFocus.BLOOD_SUGAR_BALANCE: "blood sugar balance",
    WellnessFocus.BONE_JOINT_SUPPORT: "bone and joint support",
    WellnessFocus.ANTI_INFLAMMATORY: "reducing inflammation",
}


def margin_for(difference: int) -> ComparisonMargin:
    if difference >= 25:
        return ComparisonMargin.DECISIVE
    if difference >= 15:
        return ComparisonMargin.MODERATE
    if difference >= 5:
        return ComparisonMargin.SLIGHT
    return ComparisonMargin.TIE


def compare_foods(
    foods: Sequence[AnalyzedFood], focus: WellnessFocus = WellnessFocus.BALANCED
) -> ComparisonResult:
    """Rank two or more foods for every focus and compare nutrients.

    Raises ValueError when fewer than two foods are given.
    """
    if len(foods) < 2:
        raise ValueError("At least two foods are required for comparison")
    focus_winners = {
        each_focus: _focus_winner(foods, each_focus) for each_focus in WellnessFocus
    }
    return ComparisonResult(
        foods=tuple(foods),
        focus=focus,
        winner=focus_winners[focus],
        focus_winners=focus_winners,
        nutrient_comparison={
            name: _nutrient_leader(foods, name) for name in NUTRIENT_FIELDS
        },
    )


def compare_two(
    food_a: AnalyzedFood, food_b: AnalyzedFood, focus: WellnessFocus
) -> HeadToHead:
    """Head-to-head verdict for one focus; gaps under 5 points are ties."""
    score_a = food_a.grading.focus_grades[focus].score
    score_b = food_b.grading.focus_grades[focus].score
    difference = abs(score_a - score_b)
    label = FOCUS_LABELS[focus]
    if difference < TIE_THRESHOLD:
        return HeadToHead(
            winner="tie",
            score_a=score_a,
            score_b=score_b,
            explanation=(
                f"Both {food_a.name} and {food_b.name} are similarly suited "
                f"for {label}."
            ),
        )
    winner, name = ("A", food_a.name) if score_a > score_b else ("B", food_b.name)
    return HeadToHead(
        winner=winner,
        score_a=score_a,
        score_b=score_b,
        explanation=f"{name} scores {difference} points higher for {label}.",
    )


def _focus_winner(
    foods: Sequence[AnalyzedFood], focus: WellnessFocus
) -> ComparisonWinner:
    ranked = sorted(
        foods, key=lambda food: food.grading.focus_grades[focus].score, reverse=True
    )
    best = ranked[0].grading.focus_grades[focus].score
    runner_up = ranked[1].grading.focus_grades[focus].score
    return ComparisonWinner(
        food_id=ranked[0].id,
        food_name=ranked[0].name,
        margin=margin_for(best - runner_up),
        score=best,
    )


def _nutrient_leader(foods: Sequence[AnalyzedFood], name: str) -> NutrientLeader:
    values = {food.id: getattr(food.nutrition, name) for food in foods}
    lower_is_better = name in LOWER_IS_BETTER
    leader = foods[0]
    for food in foods[1:]:
        value = getattr(food.nutrition, name)
        best = getattr(leader.nutrition, name)
        if (value < best) if lower_is_better else (value > best):
            leader = food
    return NutrientLeader(values=values, leader=leader.id)
