"""Food descriptor domain models."""

from dataclasses import dataclass
from enum import Enum


class FoodType(str, Enum):
    """Kind of food, used to pick a resolution route."""

    WHOLE_FOOD = "whole_food"
    BRANDED_PACKAGED = "branded_packaged"
    RESTAURANT_ITEM = "restaurant_item"
    HOMEMADE_DISH = "homemade_dish"
    GENERIC_DISH = "generic_dish"


@dataclass(frozen=True)
class IngredientDescriptor:
    """Ingredient of a composite dish with its estimated mass."""

    name: str
    estimated_grams: float


@dataclass(frozen=True)
class NormalizedFoodDescriptor:
    """Identified food item to resolve."""

    name: str
    estimated_grams: float
    food_type: FoodType = FoodType.WHOLE_FOOD
    quantity: float = 1.0
    unit: str = "serving"
    brand_name: str | None = None
    restaurant_name: str | None = None
    cuisine: str | None = None
    ingredients: tuple[IngredientDescriptor, ...] = ()
    confidence: float = 1.0
    barcode: str | None = None

    def __post_init__(self) -> None:
        if self.estimated_grams <= 0:
            raise ValueError("estimated_grams must be positive")
        if not 0 <= self.confidence <= 1:
            raise ValueError("confidence must be within [0, 1]")
