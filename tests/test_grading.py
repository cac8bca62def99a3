"""Tests for deterministic grading."""

from nutrition_engine.domain.glycemic import GIMatchSource, GIResult, GlycemicBand
from nutrition_engine.domain.grading import (
    HealthGrade,
    InflammatoryBand,
    SatietyBand,
    WellnessFocus,
)
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.services.grading import (
    DeterministicGrader,
    GIAdjustmentConfig,
    GradingInput,
    inflammatory_index,
    nutri_score,
    satiety,
    score_component,
    score_to_grade,
)

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
APPLE_GI = GIResult(
    gi=36,
    gl=8,
    gi_band=GlycemicBand.LOW,
    gl_band=GlycemicBand.LOW,
    source=GIMatchSource.EXACT,
    confidence=0.95,
)


def test_score_component_tiers() -> None:
    assert score_component(20, (20, 15, 10, 5)) == 100
    assert score_component(12, (20, 15, 10, 5)) == 60
    assert score_component(3, (20, 15, 10, 5)) == 20
    assert score_component(3, (2, 4, 6, 10), higher_is_better=False) == 80
    assert score_component(11, (2, 4, 6, 10), higher_is_better=False) == 20


def test_score_to_grade_boundaries() -> None:
    assert score_to_grade(85) == HealthGrade.A
    assert score_to_grade(84) == HealthGrade.B
    assert score_to_grade(70) == HealthGrade.B
    assert score_to_grade(69) == HealthGrade.C
    assert score_to_grade(55) == HealthGrade.C
    assert score_to_grade(40) == HealthGrade.D
    assert score_to_grade(39) == HealthGrade.F


def test_balanced_grade_for_lean_protein() -> None:
    result = DeterministicGrader().grade_focus(
        CHICKEN_BREAST, 100, WellnessFocus.BALANCED
    )

    assert result.score == 80
    assert result.grade == HealthGrade.B
    assert result.pros == ("Good protein content", "Low saturated fat")
    assert result.cons == ("Low fiber",)
    assert result.insight == (
        "Good nutritional profile with minor areas for improvement."
    )


def test_muscle_building_rewards_complete_protein() -> None:
    result = DeterministicGrader().grade_focus(
        CHICKEN_BREAST, 100, WellnessFocus.MUSCLE_BUILDING, food_group="meat"
    )

    assert result.score == 96
    assert result.grade == HealthGrade.A
    assert "Complete amino acid profile" in result.pros
    assert "High protein density" in result.pros


def test_bone_support_penalizes_high_sodium() -> None:
    result = DeterministicGrader().grade_focus(
        NutrientVector(sodium_mg=1200), 100, WellnessFocus.BONE_JOINT_SUPPORT
    )

    assert result.score == 35
    assert result.cons == ("Low calcium content", "High sodium may deplete calcium")


def test_focus_scores_are_clamped() -> None:
    result = DeterministicGrader().grade_focus(
        NutrientVector(fiber_g=10), 100, WellnessFocus.GUT_HEALTH, "legume yogurt"
    )

    assert result.score == 100
    assert result.grade == HealthGrade.A


def test_nutri_score_for_fruit() -> None:
    overall = nutri_score(
        GradingInput(nutrition=APPLE, serving_grams=182, food_group="fruit")
    )

    assert overall.nutri_score_points == -5
    assert overall.grade == HealthGrade.A
    assert overall.score == 82


def test_nutri_score_for_sugary_beverage() -> None:
    cola = NutrientVector(calories=139, sugar_g=35, sodium_mg=10)

    overall = DeterministicGrader().overall_grade(cola, 330, is_beverage=True)

    assert overall.nutri_score_points == 14
    assert overall.grade == HealthGrade.F
    assert overall.score == 47


def test_satiety_uses_water_or_default() -> None:
    potato = NutrientVector(calories=87, protein_g=2, fiber_g=2, fat_g=0.1, water_g=77)

    result = satiety(GradingInput(nutrition=potato))

    assert result.score == 65
    assert result.category == SatietyBand.HIGH


def test_inflammatory_index_bands() -> None:
    sweet = inflammatory_index(
        GradingInput(nutrition=NutrientVector(saturated_fat_g=10, sugar_g=30))
    )
    greens = inflammatory_index(
        GradingInput(
            nutrition=NutrientVector(fiber_g=10, vitamin_c_mg=30, magnesium_mg=80)
        )
    )

    assert sweet.index == 0.67
    assert sweet.category == InflammatoryBand.MILDLY_INFLAMMATORY
    assert greens.index == -1.3
    assert greens.category == InflammatoryBand.ANTI_INFLAMMATORY


def test_gi_adjustment_interpolates_and_caps() -> None:
    config = GIAdjustmentConfig()

    assert config.adjustment(0, GlycemicBand.LOW) == 15
    assert config.adjustment(36, GlycemicBand.LOW) == 8
    assert config.adjustment(62, GlycemicBand.MEDIUM) == 0
    assert config.adjustment(85, GlycemicBand.HIGH) == -10
    assert config.adjustment(100, GlycemicBand.HIGH) == -15


def test_grade_applies_gi_to_three_focuses() -> None:
    grader = DeterministicGrader()

    plain = grader.grade(APPLE, 182, food_group="fruit")
    with_gi = grader.grade(APPLE, 182, food_group="fruit", gi=APPLE_GI)

    def delta(focus: WellnessFocus) -> int:
        return with_gi.focus_grades[focus].score - plain.focus_grades[focus].score

    assert delta(WellnessFocus.BLOOD_SUGAR_BALANCE) == 8
    assert delta(WellnessFocus.WEIGHT_MANAGEMENT) == 5
    assert delta(WellnessFocus.ENERGY_ENDURANCE) == 3
    assert delta(WellnessFocus.HEART_HEALTH) == 0
    blood_sugar = with_gi.focus_grades[WellnessFocus.BLOOD_SUGAR_BALANCE]
    assert "Low glycemic index" in blood_sugar.pros
    assert blood_sugar.insight.startswith("Low GI supports stable blood sugar. ")
    assert with_gi.overall == plain.overall


def test_low_gi_bonus_is_clamped_at_100() -> None:
    lentils = NutrientVector(
        calories=116, carbs_g=20, sugar_g=2, fiber_g=8, protein_g=20, sodium_mg=2
    )
    lentil_gi = GIResult(
        gi=40,
        gl=5,
        gi_band=GlycemicBand.LOW,
        gl_band=GlycemicBand.LOW,
        source=GIMatchSource.FUZZY,
        confidence=0.81,
    )
    grader = DeterministicGrader()

    plain = grader.grade(lentils, 100, food_group="legume")
    with_gi = grader.grade(lentils, 100, food_group="legume", gi=lentil_gi)

    assert GIAdjustmentConfig().adjustment(40, GlycemicBand.LOW) == 8
    assert plain.focus_grades[WellnessFocus.BLOOD_SUGAR_BALANCE].score == 100
    blood_sugar = with_gi.focus_grades[WellnessFocus.BLOOD_SUGAR_BALANCE]
    assert blood_sugar.score == 100
    assert blood_sugar.grade == HealthGrade.A


def test_low_confidence_gi_is_ignored() -> None:
    grader = DeterministicGrader()
    guess = GIResult(
        gi=45,
        gl=8,
        gi_band=GlycemicBand.LOW,
        gl_band=GlycemicBand.LOW,
        source=GIMatchSource.CATEGORY,
        confidence=0.39,
    )

    assert grader.grade(APPLE, 182, gi=guess) == grader.grade(APPLE, 182)


def test_summary_lists_are_unique_and_limited() -> None:
    result = DeterministicGrader().grade(CHICKEN_BREAST, 100, food_group="meat")

    assert len(result.strengths) <= 5
    assert len(set(result.strengths)) == len(result.strengths)
    assert result.strengths[0] == "Good protein content"
    assert result.concerns.count("Low fiber") == 1
    assert set(result.focus_grades) == set(WellnessFocus)
