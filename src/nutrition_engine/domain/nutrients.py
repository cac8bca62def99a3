"""Nutrient vector domain model."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace

WHOLE_UNIT_FIELDS = frozenset(
    {
        "calories",
        "sodium_mg",
        "potassium_mg",
        "calcium_mg",
        "cholesterol_mg",
        "phosphorus_mg",
        "magnesium_mg",
    }
)
TRACE_FIELDS = frozenset(
    {
        "thiamin_mg",
        "riboflavin_mg",
        "vitamin_b6_mg",
        "vitamin_b12_mcg",
        "vitamin_d_mcg",
        "vitamin_k_mcg",
    }
)


@dataclass(frozen=True)
class NutrientVector:
    """Per-serving nutrient composition.

    Every field is a non-negative float and defaults to zero. Units are
    encoded in the field name; ``calories`` is kcal.
    """

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0
    saturated_fat_g: float = 0.0
    trans_fat_g: float = 0.0
    monounsaturated_fat_g: float = 0.0
    polyunsaturated_fat_g: float = 0.0
    cholesterol_mg: float = 0.0
    potassium_mg: float = 0.0
    calcium_mg: float = 0.0
    iron_mg: float = 0.0
    magnesium_mg: float = 0.0
    zinc_mg: float = 0.0
    phosphorus_mg: float = 0.0
    vitamin_a_mcg: float = 0.0
    vitamin_d_mcg: float = 0.0
    vitamin_e_mg: float = 0.0
    vitamin_k_mcg: float = 0.0
    vitamin_c_mg: float = 0.0
    thiamin_mg: float = 0.0
    riboflavin_mg: float = 0.0
    niacin_mg: float = 0.0
    vitamin_b6_mg: float = 0.0
    folate_mcg: float = 0.0
    vitamin_b12_mcg: float = 0.0
    choline_mg: float = 0.0
    pantothenic_acid_mg: float = 0.0
    water_g: float = 0.0

    def __post_init__(self) -> None:
        for name in NUTRIENT_FIELDS:
            value = getattr(self, name)
            if value is None:
                raise ValueError(f"Nutrient {name} must not be None")
            number = float(value)
            if number < 0:
                raise ValueError(f"Nutrient {name} must be non-negative, got {number}")
            object.__setattr__(self, name, number)

    @classmethod
    def zero(cls) -> "NutrientVector":
        """Return a vector with every nutrient set to zero."""
        return cls()

    @classmethod
    def from_mapping(cls, values: Mapping[str, float | None]) -> "NutrientVector":
        """Build a vector from a partial mapping, ignoring unknown keys.

        Missing or ``None`` values become zero and negative values are
        clamped to zero.
        """
        known = {
            name: max(0.0, float(value))
            for name, value in values.items()
            if name in _FIELD_SET and value is not None
        }
        return cls(**known)

    def as_dict(self) -> dict[str, float]:
        """Return the vector as a plain mapping."""
        return {name: getattr(self, name) for name in NUTRIENT_FIELDS}

    def rounded(self) -> "NutrientVector":
        """Return a copy rounded to each nutrient's display precision."""
        return NutrientVector(
            **{
                name: round_nutrient(name, getattr(self, name))
                for name in NUTRIENT_FIELDS
            }
        )

    def scaled(self, source_grams: float, target_grams: float) -> "NutrientVector":
        """Scale from the mass this vector represents to a target mass."""
        if source_grams == target_grams or source_grams == 0:
            return replace(self)
        ratio = target_grams / source_grams
        return NutrientVector(
            **{
                name: round_nutrient(name, getattr(self, name) * ratio)
                for name in NUTRIENT_FIELDS
            }
        )

    def merged(
        self, secondary: "NutrientVector", keep: Iterable[str]
    ) -> "NutrientVector":
        """Keep the named fields from this vector and fill the rest from another."""
        kept = set(keep)
        return NutrientVector(
            **{
                name: getattr(self if name in kept else secondary, name)
                for name in NUTRIENT_FIELDS
            }
        )

    @classmethod
    def total(cls, vectors: Iterable["NutrientVector"]) -> "NutrientVector":
        """Sum vectors field by field and round the totals."""
        sums = dict.fromkeys(NUTRIENT_FIELDS, 0.0)
        for vector in vectors:
            for name in NUTRIENT_FIELDS:
                sums[name] += getattr(vector, name)
        return cls(
            **{name: round_nutrient(name, value) for name, value in sums.items()}
        )


NUTRIENT_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(NutrientVector))
_FIELD_SET = frozenset(NUTRIENT_FIELDS)

MICRONUTRIENT_FIELDS: tuple[str, ...] = (
    "potassium_mg",
    "calcium_mg",
    "iron_mg",
    "magnesium_mg",
    "zinc_mg",
    "phosphorus_mg",
    "vitamin_a_mcg",
    "vitamin_d_mcg",
    "vitamin_e_mg",
    "vitamin_k_mcg",
    "vitamin_c_mg",
    "thiamin_mg",
    "riboflavin_mg",
    "niacin_mg",
    "vitamin_b6_mg",
    "folate_mcg",
    "vitamin_b12_mcg",
    "choline_mg",
    "pantothenic_acid_mg",
)


def round_nutrient(name: str, value: float) -> float:
    """Round a nutrient amount to its display precision."""
    if name in WHOLE_UNIT_FIELDS:
        return float(round(value))
    if name in TRACE_FIELDS:
        return round(value, 2)
    return round(value, 1)
