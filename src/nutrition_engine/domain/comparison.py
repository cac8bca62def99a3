"""Food comparison domain models."""

from dataclasses import dataclass
from enum import Enum

from nutrition_engine.domain.analysis import AnalyzedFood
from nutrition_engine.domain.grading import WellnessFocus


class ComparisonMargin(str, Enum):
    """How clearly the winner beat the runner-up."""

    DECISIVE = "decisive"
    MODERATE = "moderate"
    SLIGHT = "slight"
    TIE = "tie"


@dataclass(frozen=True)
class ComparisonWinner:
    food_id: str
    food_name: str
    margin: ComparisonMargin
    score: int


@dataclass(frozen=True)
class NutrientLeader:
    """Values per food id and the id of the leading food."""

    values: dict[str, float]
    leader: str


@dataclass(frozen=True)
class ComparisonResult:
    """Deterministic ranking of two or more foods."""

    foods: tuple[AnalyzedFood, ...]
    focus: WellnessFocus
    winner: ComparisonWinner
    focus_winners: dict[WellnessFocus, ComparisonWinner]
    nutrient_comparison: dict[str, NutrientLeader]


@dataclass(frozen=True)
class HeadToHead:
    """Quick A versus B outcome for a single focus."""

    winner: str
    score_a: int
    score_b: int
    explanation: str
