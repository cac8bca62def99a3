"""Deterministic food grading.

All grades are pure functions of the nutrient vector, serving mass, food
group and beverage flag:

* overall grade follows the Nutri-Score point system (per 100 g),
* ten focus grades are weighted sums of tiered component scores,
* satiety follows the Holt satiety-index factors,
* the inflammatory index uses simplified DII coefficients.

An optional GI result adjusts the blood sugar, weight management and
energy scores.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from nutrition_engine.domain.glycemic import GIResult, GlycemicBand
from nutrition_engine.domain.grading import (
    CompleteGradingResult,
    FocusGradeResult,
    HealthGrade,
    InflammatoryBand,
    InflammatoryResult,
    OverallGrade,
    SatietyBand,
    SatietyResult,
    WellnessFocus,
)
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.services.glycemic import has_relevant_gi

_ENERGY_FOOD = (335, 670, 1005, 1340, 1675, 2010, 2345, 2680, 3015, 3350)
_ENERGY_BEVERAGE = (0, 30, 60, 90, 120, 150, 180, 210, 240, 270)
_SUGAR_FOOD = (4.5, 9, 13.5, 18, 22.5, 27, 31, 36, 40, 45)
_SUGAR_BEVERAGE = (0, 1.5, 3, 4.5, 6, 7.5, 9, 10.5, 12, 13.5)
_SATURATED_FAT = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)
_SODIUM = (90, 180, 270, 360, 450, 540, 630, 720, 810, 900)
_FIBER_POINTS = (0.9, 1.9, 2.8, 3.7, 4.7)
_PROTEIN_POINTS = (1.6, 3.2, 4.8, 6.4, 8.0)
_KJ_PER_KCAL = 4.184
_DEFAULT_SERVING_GRAMS = 100.0
_DEFAULT_WATER_PER_100G = 50.0
_SUMMARY_LIMIT = 5

Tiers = tuple[float, float, float, float]


@dataclass(frozen=True)
class GradingInput:
    """Nutrients for one serving plus the metadata grading depends on.

    Omega-3 is not part of the nutrient vector; zero means unknown and
    the omega-3 components fall back to neutral defaults.
    """

    nutrition: NutrientVector
    serving_grams: float = _DEFAULT_SERVING_GRAMS
    food_group: str = ""
    is_beverage: bool = False
    omega3_g: float = 0.0

    @property
    def grams(self) -> float:
        return self.serving_grams or _DEFAULT_SERVING_GRAMS

    @property
    def group(self) -> str:
        return self.food_group.lower()

    def per_100g(self, value: float) -> float:
        return value / self.grams * 100

    def group_has(self, *words: str) -> bool:
        return any(word in self.group for word in words)


@dataclass(frozen=True)
class GIAdjustmentConfig:
    """Tunable constants for the glycemic score adjustment.

    Low GI earns a bonus, high GI a penalty; the magnitude interpolates
    within each band and is capped at ``max_magnitude``.
    """

    min_confidence: float = 0.6
    low_bonus_max: float = 15
    medium_offset_max: float = 5
    high_penalty_min: float = -5
    band_span: float = 10
    medium_band_width: float = 14
    high_band_width: float = 30
    max_magnitude: int = 15
    weight_management_factor: float = 0.6
    energy_endurance_factor: float = 0.4

    def adjustment(self, gi: int, band: GlycemicBand) -> int:
        if band == GlycemicBand.LOW:
            raw = self.low_bonus_max - gi / 55 * self.band_span
        elif band == GlycemicBand.MEDIUM:
            progress = (gi - 55) / self.medium_band_width
            raw = self.medium_offset_max - progress * self.band_span
        else:
            progress = (gi - 70) / self.high_band_width
            raw = self.high_penalty_min - progress * self.band_span
        return max(-self.max_magnitude, min(self.max_magnitude, round(raw)))


def score_component(value: float, tiers: Tiers, higher_is_better: bool = True) -> int:
    """Map a value to 100/80/60/40/20 using excellent/good/fair/poor cut-offs."""
    for threshold, score in zip(tiers, (100, 80, 60, 40), strict=True):
        if (value >= threshold) if higher_is_better else (value <= threshold):
            return score
    return 20


def score_to_grade(score: int) -> HealthGrade:
    if score >= 85:
        return HealthGrade.A
    if score >= 70:
        return HealthGrade.B
    if score >= 55:
        return HealthGrade.C
    if score >= 40:
        return HealthGrade.D
    return HealthGrade.F


def _clamp(score: float) -> int:
    return max(0, min(100, round(score)))


def _optional(value: float, tiers: Tiers, default: int) -> int:
    return score_component(value, tiers) if value else default


def _banded_insight(score: int, texts: tuple[str, str, str, str]) -> str:
    if score >= 85:
        return texts[0]
    if score >= 70:
        return texts[1]
    if score >= 55:
        return texts[2]
    return texts[3]


def _result(
    score: float, insight: str, pros: list[str], cons: list[str]
) -> FocusGradeResult:
    clamped = _clamp(score)
    return FocusGradeResult(
        grade=score_to_grade(clamped),
        score=clamped,
        insight=insight,
        pros=tuple(pros),
        cons=tuple(cons),
    )


# Focus grades


def _grade_balanced(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    score = round(
        score_component(n.protein_g, (20, 15, 10, 5)) * 0.25
        + score_component(n.fiber_g, (8, 5, 3, 1)) * 0.25
        + score_component(n.saturated_fat_g, (2, 4, 6, 10), False) * 0.20
        + score_component(n.sodium_mg, (300, 500, 700, 1000), False) * 0.15
        + score_component(n.sugar_g, (5, 10, 15, 25), False) * 0.15
    )
    pros: list[str] = []
    cons: list[str] = []
    if n.protein_g >= 15:
        pros.append("Good protein content")
    if n.fiber_g >= 5:
        pros.append("Good fiber source")
    if n.saturated_fat_g <= 3:
        pros.append("Low saturated fat")
    if n.saturated_fat_g > 6:
        cons.append("High in saturated fat")
    if n.sodium_mg > 700:
        cons.append("High sodium")
    if n.sugar_g > 15:
        cons.append("High sugar content")
    if n.fiber_g < 2:
        cons.append("Low fiber")
    if score >= 85:
        insight = "Nutrient-dense with balanced macros and minimal negatives."
    elif score >= 70:
        insight = "Good nutritional profile with minor areas for improvement."
    elif score >= 55:
        insight = "Moderate nutrition - consider balancing with healthier options."
    elif score >= 40:
        insight = "Several nutritional concerns - best enjoyed occasionally."
    else:
        insight = "Low nutritional value relative to calories."
    return _result(score, insight, pros, cons)


def _grade_muscle_building(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    complete_protein = g.group_has("meat", "fish", "egg", "dairy", "legume")
    density = n.protein_g / n.calories * 100 if n.calories > 0 else 0.0
    carb_score = 80 if 15 <= n.carbs_g <= 60 else 60
    score = round(
        score_component(n.protein_g, (30, 20, 12, 6)) * 0.60
        + (10 if complete_protein else 0)
        + score_component(density, (15, 10, 5, 2)) * 0.20
        + carb_score * 0.10
    )
    pros: list[str] = []
    cons: list[str] = []
    if n.protein_g >= 25:
        pros.append("Excellent protein for muscle synthesis")
    elif n.protein_g >= 18:
        pros.append("Good protein content")
    if complete_protein:
        pros.append("Complete amino acid profile")
    if density > 10:
        pros.append("High protein density")
    if n.protein_g < 8:
        cons.append("Very low protein")
    if n.calories > 600 and n.protein_g < 20:
        cons.append("High calories without proportional protein")
    if n.protein_g >= 25:
        insight = "Excellent for muscle protein synthesis with optimal protein content."
    elif n.protein_g >= 18:
        insight = "Good protein source to support muscle building."
    elif n.protein_g >= 10:
        insight = "Moderate protein - pair with other protein sources."
    else:
        insight = "Low protein content - not ideal for muscle building alone."
    return _result(score, insight, pros, cons)


def _grade_heart_health(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    score = round(
        score_component(n.saturated_fat_g, (2, 4, 7, 12), False) * 0.30
        + score_component(n.sodium_mg, (300, 500, 800, 1200), False) * 0.25
        + (0 if n.trans_fat_g > 0.5 else 100) * 0.10
        + score_component(n.cholesterol_mg, (50, 100, 150, 250), False) * 0.10
        + score_component(n.fiber_g, (8, 5, 3, 1)) * 0.15
        + _optional(n.potassium_mg, (500, 300, 150, 50), 50) * 0.10
        + (10 if g.omega3_g > 0.5 else 0)
    )
    pros: list[str] = []
    cons: list[str] = []
    if n.saturated_fat_g <= 3:
        pros.append("Low saturated fat")
    if n.sodium_mg <= 400:
        pros.append("Low sodium")
    if n.fiber_g >= 5:
        pros.append("Heart-healthy fiber")
    if n.potassium_mg >= 300:
        pros.append("Good potassium source")
    if g.omega3_g > 0.5:
        pros.append("Contains omega-3 fatty acids")
    if n.saturated_fat_g > 7:
        cons.append("High saturated fat")
    if n.sodium_mg > 800:
        cons.append("High sodium")
    if n.trans_fat_g > 0:
        cons.append("Contains trans fat")
    if n.cholesterol_mg > 150:
        cons.append("High cholesterol")
    insight = _banded_insight(
        score,
        (
            "Heart-healthy profile with low saturated fat and sodium.",
            "Generally supportive of heart health with minor concerns.",
            "Some heart health concerns - balance with cardio-protective foods.",
            "Multiple heart health risk factors present.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_energy_endurance(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    complex_ratio = (n.carbs_g - n.sugar_g) / n.carbs_g if n.carbs_g > 0 else 0.0
    if n.carbs_g >= 30 and complex_ratio >= 0.6:
        carb_score = 100
    elif n.carbs_g >= 20 and complex_ratio >= 0.5:
        carb_score = 80
    elif n.carbs_g >= 10:
        carb_score = 60
    else:
        carb_score = 40
    sugar_crash = n.sugar_g > 15 and n.fiber_g < 3
    score = round(
        carb_score * 0.35
        + _optional(n.iron_mg, (4, 2.5, 1.5, 0.5), 50) * 0.20
        + _optional(n.magnesium_mg, (80, 50, 25, 10), 50) * 0.15
        + score_component(n.fiber_g, (6, 4, 2, 1)) * 0.20
        + 10
    ) - (20 if sugar_crash else 0)
    pros: list[str] = []
    cons: list[str] = []
    if complex_ratio >= 0.7 and n.carbs_g >= 25:
        pros.append("Good complex carbohydrates")
    if n.iron_mg >= 3:
        pros.append("Iron for oxygen transport")
    if n.magnesium_mg >= 50:
        pros.append("Magnesium for ATP production")
    if n.fiber_g >= 4:
        pros.append("Sustained energy release")
    if sugar_crash:
        cons.append("High sugar may cause energy crash")
    if n.carbs_g < 10:
        cons.append("Low carbs may limit endurance")
    insight = _banded_insight(
        score,
        (
            "Excellent sustained energy source with complex carbs and key minerals.",
            "Good for energy with sustained release nutrients.",
            "Moderate energy profile - may not sustain long activity.",
            "Limited energy-supporting nutrients.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_weight_management(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    calorie_density = n.calories / g.grams
    score = round(
        score_component(calorie_density, (0.8, 1.2, 1.8, 2.5), False) * 0.30
        + score_component(n.protein_g, (25, 18, 12, 5)) * 0.30
        + score_component(n.fiber_g, (8, 5, 3, 1)) * 0.25
        + score_component(n.sugar_g, (3, 8, 15, 25), False) * 0.15
    )
    pros: list[str] = []
    cons: list[str] = []
    if calorie_density <= 1.0:
        pros.append("Low calorie density")
    if n.protein_g >= 18:
        pros.append("High protein for satiety")
    if n.fiber_g >= 5:
        pros.append("Fiber promotes fullness")
    if n.calories <= 200 and n.protein_g >= 10:
        pros.append("Low cal with good protein")
    if calorie_density > 2.0:
        cons.append("High calorie density")
    if n.sugar_g > 15:
        cons.append("High sugar may increase hunger")
    if n.calories > 500 and n.protein_g < 15:
        cons.append("High calories without satiety")
    insight = _banded_insight(
        score,
        (
            "Excellent for weight management - filling with controlled calories.",
            "Supportive of weight goals with good satiety factors.",
            "Moderate - watch portions to fit calorie goals.",
            "High calorie density with limited satiety.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_brain_focus(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    if n.sugar_g < 8 and n.fiber_g >= 3:
        glycemic_score = 100
    elif n.sugar_g < 12 and n.fiber_g >= 2:
        glycemic_score = 80
    elif n.sugar_g < 18:
        glycemic_score = 60
    else:
        glycemic_score = 40
    choline_bonus = 15 if g.group_has("egg", "fish") else 0
    score = round(
        _optional(g.omega3_g, (1, 0.5, 0.2, 0.05), 40) * 0.30
        + glycemic_score * 0.25
        + _optional(n.vitamin_c_mg, (30, 15, 8, 2), 50) * 0.20
        + score_component(n.fiber_g, (6, 4, 2, 1)) * 0.15
        + 10
        + choline_bonus
    ) - (15 if n.trans_fat_g > 0 else 0)
    pros: list[str] = []
    cons: list[str] = []
    if g.omega3_g >= 0.5:
        pros.append("Omega-3s for brain health")
    if n.sugar_g < 8 and n.fiber_g >= 3:
        pros.append("Stable blood sugar for focus")
    if n.vitamin_c_mg >= 15:
        pros.append("Antioxidants protect brain cells")
    if choline_bonus:
        pros.append("Contains choline for neurotransmitters")
    if n.trans_fat_g > 0:
        cons.append("Trans fat harms brain function")
    if n.sugar_g > 20:
        cons.append("High sugar impairs focus")
    insight = _banded_insight(
        score,
        (
            "Brain-boosting nutrients with stable energy release.",
            "Supportive of cognitive function and focus.",
            "Some brain benefits but watch sugar content.",
            "Limited brain-supporting nutrients.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_gut_health(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    prebiotic = g.group_has("legume", "onion", "garlic", "banana", "oat")
    fermented = g.group_has("fermented", "yogurt", "kefir", "kimchi", "sauerkraut")
    prebiotic_bonus = 15 if prebiotic else 0
    fermented_bonus = 15 if fermented else 0
    processed_penalty = (10 if n.trans_fat_g > 0 else 0) + (
        10 if n.sodium_mg > 1000 else 0
    )
    score = (
        round(
            score_component(n.fiber_g, (8, 5, 3, 1)) * 0.70
            + 20
            + prebiotic_bonus
            + fermented_bonus
        )
        - processed_penalty
    )
    pros: list[str] = []
    cons: list[str] = []
    if n.fiber_g >= 8:
        pros.append("Excellent fiber for microbiome")
    elif n.fiber_g >= 5:
        pros.append("Good fiber content")
    if prebiotic_bonus:
        pros.append("Contains prebiotic fibers")
    if fermented_bonus:
        pros.append("Fermented - live probiotics")
    if n.fiber_g < 2:
        cons.append("Very low fiber")
    if processed_penalty > 10:
        cons.append("Processing may harm gut health")
    insight = _banded_insight(
        score,
        (
            "Excellent for gut health with high fiber and beneficial compounds.",
            "Good fiber source supporting digestive health.",
            "Moderate fiber - aim for more fiber-rich foods.",
            "Low fiber content - not ideal for gut health.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_blood_sugar_balance(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    complex_ratio = (n.carbs_g - n.sugar_g) / n.carbs_g if n.carbs_g > 0 else 1.0
    if complex_ratio >= 0.8:
        quality_score = 100
    elif complex_ratio >= 0.6:
        quality_score = 80
    elif complex_ratio >= 0.4:
        quality_score = 60
    else:
        quality_score = 40
    heavy_load = n.carbs_g > 50 and n.fiber_g < 5
    score = round(
        score_component(n.sugar_g, (3, 8, 15, 25), False) * 0.35
        + score_component(n.fiber_g, (8, 5, 3, 1)) * 0.25
        + score_component(n.protein_g, (20, 12, 6, 3)) * 0.20
        + quality_score * 0.20
    ) - (15 if heavy_load else 0)
    pros: list[str] = []
    cons: list[str] = []
    if n.sugar_g < 5:
        pros.append("Very low sugar")
    if n.fiber_g >= 5:
        pros.append("Fiber slows glucose absorption")
    if n.protein_g >= 15 and n.carbs_g < 30:
        pros.append("Protein moderates blood sugar")
    if complex_ratio >= 0.7:
        pros.append("Complex carbohydrates")
    if n.sugar_g > 15:
        cons.append("High sugar content")
    if heavy_load:
        cons.append("High carb load without fiber")
    if complex_ratio < 0.5:
        cons.append("Mostly simple carbs")
    insight = _banded_insight(
        score,
        (
            "Excellent for blood sugar stability with minimal glucose impact.",
            "Good blood sugar profile with balanced macros.",
            "Moderate blood sugar impact - pair with protein/fiber.",
            "May cause blood sugar spikes.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_bone_joint_support(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    sodium_penalty = 0.0
    if n.sodium_mg > 800:
        sodium_score = score_component(n.sodium_mg, (400, 600, 1000, 1500), False)
        sodium_penalty = (100 - sodium_score) * 0.2
    score = round(
        _optional(n.calcium_mg, (300, 150, 75, 25), 40) * 0.35
        + _optional(n.vitamin_d_mcg, (5, 2.5, 1, 0.3), 40) * 0.25
        + _optional(n.magnesium_mg, (80, 50, 25, 10), 40) * 0.20
        + 15
        + (10 if g.omega3_g >= 0.5 else 0)
    ) - round(sodium_penalty)
    pros: list[str] = []
    cons: list[str] = []
    if n.calcium_mg >= 150:
        pros.append("Good calcium for bones")
    if n.vitamin_d_mcg >= 2:
        pros.append("Vitamin D aids calcium absorption")
    if n.magnesium_mg >= 50:
        pros.append("Magnesium for bone matrix")
    if g.omega3_g >= 0.5:
        pros.append("Omega-3 supports joint health")
    if n.calcium_mg < 50:
        cons.append("Low calcium content")
    if n.sodium_mg > 1000:
        cons.append("High sodium may deplete calcium")
    insight = _banded_insight(
        score,
        (
            "Excellent bone-building nutrients present.",
            "Good support for bone and joint health.",
            "Some bone-supporting nutrients.",
            "Limited bone-building nutrients.",
        ),
    )
    return _result(score, insight, pros, cons)


def _grade_anti_inflammatory(g: GradingInput) -> FocusGradeResult:
    n = g.nutrition
    plant_bonus = 10 if g.group_has("fruit", "vegetable", "berry") else 0
    score = round(
        _optional(g.omega3_g, (1, 0.5, 0.2, 0.05), 40) * 0.25
        + score_component(n.saturated_fat_g, (2, 4, 7, 12), False) * 0.25
        + score_component(n.sugar_g, (5, 10, 15, 25), False) * 0.20
        + _optional(n.vitamin_c_mg, (30, 15, 8, 2), 50) * 0.15
        + score_component(n.fiber_g, (6, 4, 2, 1)) * 0.15
        + plant_bonus
    ) - (20 if n.trans_fat_g > 0 else 0)
    pros: list[str] = []
    cons: list[str] = []
    if g.omega3_g >= 0.5:
        pros.append("Anti-inflammatory omega-3s")
    if n.saturated_fat_g <= 3:
        pros.append("Low saturated fat")
    if n.vitamin_c_mg >= 15:
        pros.append("Antioxidants reduce inflammation")
    if plant_bonus:
        pros.append("Plant compounds with anti-inflammatory effects")
    if n.trans_fat_g > 0:
        cons.append("Trans fat promotes inflammation")
    if n.saturated_fat_g > 7:
        cons.append("High saturated fat is pro-inflammatory")
    if n.sugar_g > 15:
        cons.append("Excess sugar increases inflammation")
    insight = _banded_insight(
        score,
        (
            "Strong anti-inflammatory profile with protective nutrients.",
            "Generally anti-inflammatory with some beneficial compounds.",
            "Neutral inflammation impact.",
            "Pro-inflammatory factors present.",
        ),
    )
    return _result(score, insight, pros, cons)


FOCUS_GRADERS: dict[WellnessFocus, Callable[[GradingInput], FocusGradeResult]] = {
    WellnessFocus.BALANCED: _grade_balanced,
    WellnessFocus.MUSCLE_BUILDING: _grade_muscle_building,
    WellnessFocus.HEART_HEALTH: _grade_heart_health,
    WellnessFocus.ENERGY_ENDURANCE: _grade_energy_endurance,
    WellnessFocus.WEIGHT_MANAGEMENT: _grade_weight_management,
    WellnessFocus.BRAIN_FOCUS: _grade_brain_focus,
    WellnessFocus.GUT_HEALTH: _grade_gut_health,
    WellnessFocus.BLOOD_SUGAR_BALANCE: _grade_blood_sugar_balance,
    WellnessFocus.BONE_JOINT_SUPPORT: _grade_bone_joint_support,
    WellnessFocus.ANTI_INFLAMMATORY: _grade_anti_inflammatory,
}


# Overall, satiety and inflammation


def _points(value: float, thresholds: Iterable[float]) -> int:
    return sum(1 for threshold in thresholds if value > threshold)


def nutri_score(g: GradingInput) -> OverallGrade:
    """Nutri-Score points, letter and a 0-100 score (higher is better)."""
    n = g.nutrition
    energy_kj = g.per_100g(n.calories * _KJ_PER_KCAL)
    negative = min(
        40,
        _points(energy_kj, _ENERGY_BEVERAGE if g.is_beverage else _ENERGY_FOOD)
        + _points(
            g.per_100g(n.sugar_g), _SUGAR_BEVERAGE if g.is_beverage else _SUGAR_FOOD
        )
        + _points(g.per_100g(n.saturated_fat_g), _SATURATED_FAT)
        + _points(g.per_100g(n.sodium_mg), _SODIUM),
    )

    fiber_points = _points(g.per_100g(n.fiber_g), _FIBER_POINTS)
    protein_points = _points(g.per_100g(n.protein_g), _PROTEIN_POINTS)
    fruit_or_vegetable = g.group_has("fruit", "vegetable")
    if fruit_or_vegetable:
        fvn_points = 5
    elif g.group_has("nut", "legume"):
        fvn_points = 4
    elif n.vitamin_c_mg > 50:
        fvn_points = 3
    elif n.vitamin_c_mg > 20:
        fvn_points = 2
    elif n.vitamin_c_mg > 5:
        fvn_points = 1
    else:
        fvn_points = 0
    positive = min(15, fiber_points + protein_points + fvn_points)
    if negative >= 11 and fiber_points < 5 and not fruit_or_vegetable:
        positive -= protein_points

    points = negative - positive
    if g.is_beverage:
        cutoffs = (1, 5, 9, 13)
    else:
        cutoffs = (-1, 2, 10, 18)
    grade = HealthGrade.F
    for cutoff, letter in zip(
        cutoffs,
        (HealthGrade.A, HealthGrade.B, HealthGrade.C, HealthGrade.D),
        strict=True,
    ):
        if points <= cutoff:
            grade = letter
            break
    return OverallGrade(
        grade=grade,
        score=_clamp(100 - (points + 15) / 55 * 100),
        nutri_score_points=points,
    )


def satiety(g: GradingInput) -> SatietyResult:
    n = g.nutrition
    water = g.per_100g(n.water_g) if n.water_g else _DEFAULT_WATER_PER_100G
    score = _clamp(
        40
        + min(30, g.per_100g(n.protein_g) * 1.5)
        + min(25, g.per_100g(n.fiber_g) * 5)
        + min(20, water * 0.25)
        - min(25, g.per_100g(n.calories) * 0.08)
        - min(15, g.per_100g(n.fat_g) * 0.3)
    )
    if score >= 80:
        category = SatietyBand.VERY_HIGH
    elif score >= 65:
        category = SatietyBand.HIGH
    elif score >= 45:
        category = SatietyBand.MODERATE
    elif score >= 25:
        category = SatietyBand.LOW
    else:
        category = SatietyBand.VERY_LOW
    return SatietyResult(score=score, category=category)


def inflammatory_index(g: GradingInput) -> InflammatoryResult:
    """Simplified dietary inflammatory index; negative is anti-inflammatory."""
    n = g.nutrition
    index = round(
        n.saturated_fat_g * 0.0373
        + n.trans_fat_g * 0.5
        + n.sugar_g * 0.01
        + n.cholesterol_mg * 0.00042
        - n.fiber_g * 0.0663
        - g.omega3_g * 0.436
        - n.magnesium_mg * 0.00484
        - n.vitamin_c_mg * 0.00848
        - n.iron_mg * 0.0064,
        2,
    )
    if index <= -0.5:
        category = InflammatoryBand.ANTI_INFLAMMATORY
    elif index <= 0.2:
        category = InflammatoryBand.NEUTRAL
    elif index <= 0.7:
        category = InflammatoryBand.MILDLY_INFLAMMATORY
    else:
        category = InflammatoryBand.INFLAMMATORY
    return InflammatoryResult(index=index, category=category)


def _first_unique(items: Iterable[str], limit: int) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))[:limit]


_GI_INSIGHT_PREFIX = {
    GlycemicBand.LOW: "Low GI supports stable blood sugar. ",
    GlycemicBand.MEDIUM: "Moderate GI impact on blood sugar. ",
    GlycemicBand.HIGH: "High GI may cause blood sugar spikes. ",
}


@dataclass
class DeterministicGrader:
    """Grade food servings without any model calls."""

    gi_adjustment: GIAdjustmentConfig = field(default_factory=GIAdjustmentConfig)

    def grade(
        self,
        nutrition: NutrientVector,
        serving_grams: float,
        food_group: str | None = None,
        is_beverage: bool = False,
        gi: GIResult | None = None,
    ) -> CompleteGradingResult:
        """Compute the overall grade, all focus grades and derived metrics."""
        grading_input = GradingInput(
            nutrition=nutrition,
            serving_grams=serving_grams,
            food_group=food_group or "",
            is_beverage=is_beverage,
        )
        focus_grades = {
            focus: grader(grading_input) for focus, grader in FOCUS_GRADERS.items()
        }
        if (
            gi is not None
            and gi.confidence >= self.gi_adjustment.min_confidence
            and has_relevant_gi(nutrition)
        ):
            focus_grades = self._adjust_for_gi(focus_grades, gi)
        return CompleteGradingResult(
            overall=nutri_score(grading_input),
            focus_grades=focus_grades,
            satiety=satiety(grading_input),
            inflammatory=inflammatory_index(grading_input),
            strengths=_first_unique(
                (pro for result in focus_grades.values() for pro in result.pros),
                _SUMMARY_LIMIT,
            ),
            concerns=_first_unique(
                (con for result in focus_grades.values() for con in result.cons),
                _SUMMARY_LIMIT,
            ),
        )

    def grade_focus(
        self,
        nutrition: NutrientVector,
        serving_grams: float,
        focus: WellnessFocus,
        food_group: str | None = None,
    ) -> FocusGradeResult:
        """Grade a single focus."""
        return FOCUS_GRADERS[focus](
            GradingInput(
                nutrition=nutrition,
                serving_grams=serving_grams,
                food_group=food_group or "",
            )
        )

    def overall_grade(
        self,
        nutrition: NutrientVector,
        serving_grams: float,
        is_beverage: bool = False,
        food_group: str | None = None,
    ) -> OverallGrade:
        """Compute only the Nutri-Score based overall grade."""
        return nutri_score(
            GradingInput(
                nutrition=nutrition,
                serving_grams=serving_grams,
                food_group=food_group or "",
                is_beverage=is_beverage,
            )
        )

    def _adjust_for_gi(
        self, focus_grades: dict[WellnessFocus, FocusGradeResult], gi: GIResult
    ) -> dict[WellnessFocus, FocusGradeResult]:
        adjustment = self.gi_adjustment.adjustment(gi.gi, gi.gi_band)
        adjusted = dict(focus_grades)

        blood_sugar = focus_grades[WellnessFocus.BLOOD_SUGAR_BALANCE]
        score = _clamp(blood_sugar.score + adjustment)
        pros = blood_sugar.pros
        cons = blood_sugar.cons
        if gi.gi_band == GlycemicBand.LOW:
            pros = (*pros, "Low glycemic index")
        elif gi.gi_band == GlycemicBand.HIGH:
            cons = (*cons, "High glycemic index")
        adjusted[WellnessFocus.BLOOD_SUGAR_BALANCE] = replace(
            blood_sugar,
            score=score,
            grade=score_to_grade(score),
            insight=_GI_INSIGHT_PREFIX[gi.gi_band] + blood_sugar.insight,
            pros=pros,
            cons=cons,
        )

        config = self.gi_adjustment
        for focus, factor in (
            (WellnessFocus.WEIGHT_MANAGEMENT, config.weight_management_factor),
            (WellnessFocus.ENERGY_ENDURANCE, config.energy_endurance_factor),
        ):
            result = focus_grades[focus]
            score = _clamp(result.score + round(adjustment * factor))
            adjusted[focus] = replace(result, score=score, grade=score_to_grade(score))
        return adjusted
