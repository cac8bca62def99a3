"""Grading domain models."""

from dataclasses import dataclass
from enum import Enum


class HealthGrade(str, Enum):
    """Letter grade."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class WellnessFocus(str, Enum):
    """Personalization lens for focus grading."""

    BALANCED = "balanced"
    MUSCLE_BUILDING = "muscle_building"
    HEART_HEALTH = "heart_health"
    ENERGY_ENDURANCE = "energy_endurance"
    WEIGHT_MANAGEMENT = "weight_management"
    BRAIN_FOCUS = "brain_focus"
    GUT_HEALTH = "gut_health"
    BLOOD_SUGAR_BALANCE = "blood_sugar_balance"
    BONE_JOINT_SUPPORT = "bone_joint_support"
    ANTI_INFLAMMATORY = "anti_inflammatory"


class SatietyBand(str, Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class InflammatoryBand(str, Enum):
    ANTI_INFLAMMATORY = "anti_inflammatory"
    NEUTRAL = "neutral"
    MILDLY_INFLAMMATORY = "mildly_inflammatory"
    INFLAMMATORY = "inflammatory"


@dataclass(frozen=True)
class FocusGradeResult:
    """Score, grade and rationale for one wellness focus."""

    grade: HealthGrade
    score: int
    insight: str
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()


@dataclass(frozen=True)
class OverallGrade:
    """Nutri-Score style overall grade."""

    grade: HealthGrade
    score: int
    nutri_score_points: int


@dataclass(frozen=True)
class SatietyResult:
    score: int
    category: SatietyBand


@dataclass(frozen=True)
class InflammatoryResult:
    index: float
    category: InflammatoryBand


@dataclass(frozen=True)
class CompleteGradingResult:
    """Full deterministic assessment for a food serving."""

    overall: OverallGrade
    focus_grades: dict[WellnessFocus, FocusGradeResult]
    satiety: SatietyResult
    inflammatory: InflammatoryResult
    strengths: tuple[str, ...]
    concerns: tuple[str, ...]
