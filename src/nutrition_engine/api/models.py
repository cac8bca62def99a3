"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field

from nutrition_engine.domain.foods import (
    FoodType,
    IngredientDescriptor,
    NormalizedFoodDescriptor,
)
from nutrition_engine.domain.grading import WellnessFocus
from nutrition_engine.domain.nutrients import NutrientVector


class IngredientPayload(BaseModel):
    """Ingredient of a homemade dish."""

    name: str = Field(min_length=1)
    estimated_grams: float = Field(gt=0)


class FoodPayload(BaseModel):
    """Identified food to resolve."""

    name: str = Field(min_length=1)
    estimated_grams: float = Field(gt=0)
    food_type: FoodType = FoodType.WHOLE_FOOD
    quantity: float = 1.0
    unit: str = "serving"
    brand_name: str | None = None
    restaurant_name: str | None = None
    cuisine: str | None = None
    ingredients: list[IngredientPayload] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0, le=1)
    barcode: str | None = None

    def to_descriptor(self) -> NormalizedFoodDescriptor:
        return NormalizedFoodDescriptor(
            name=self.name,
            estimated_grams=self.estimated_grams,
            food_type=self.food_type,
            quantity=self.quantity,
            unit=self.unit,
            brand_name=self.brand_name,
            restaurant_name=self.restaurant_name,
            cuisine=self.cuisine,
            ingredients=tuple(
                IngredientDescriptor(item.name, item.estimated_grams)
                for item in self.ingredients
            ),
            confidence=self.confidence,
            barcode=self.barcode,
        )


class BatchResolveRequest(BaseModel):
    """Foods to resolve together."""

    foods: list[FoodPayload] = Field(min_length=1)


class GradeRequest(BaseModel):
    """Nutrients of a serving to grade.

    When ``name`` is given, the food's glycemic index is looked up and its
    category is used as the food group unless one is provided.
    """

    nutrition: dict[str, float]
    serving_grams: float = Field(gt=0)
    name: str | None = None
    food_group: str | None = None
    is_beverage: bool = False
    focus: WellnessFocus | None = None

    def to_vector(self) -> NutrientVector:
        return NutrientVector.from_mapping(self.nutrition)


class MealRequest(BaseModel):
    """Foods of a meal with the wellness focus to rank by."""

    foods: list[FoodPayload] = Field(min_length=1)
    focus: WellnessFocus = WellnessFocus.BALANCED
