"""USDA FoodData Central nutrition source."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.domain.nutrients import NutrientVector, round_nutrient
from nutrition_engine.domain.resolution import ResolutionSource, SourceCandidate
from nutrition_engine.services.matching import (
    ConfidenceTiers,
    best_match,
    match_confidence,
)
from nutrition_engine.services.sources import (
    SourceAdapter,
    call_upstream,
    search_bounded,
)

_NUTRIENT_IDS: dict[int, str] = {
    1008: "calories",
    1003: "protein_g",
    1005: "carbs_g",
    1004: "fat_g",
    1079: "fiber_g",
    2000: "sugar_g",
    1093: "sodium_mg",
    1258: "saturated_fat_g",
    1257: "trans_fat_g",
    1292: "monounsaturated_fat_g",
    1293: "polyunsaturated_fat_g",
    1253: "cholesterol_mg",
    1092: "potassium_mg",
    1087: "calcium_mg",
    1089: "iron_mg",
    1090: "magnesium_mg",
    1095: "zinc_mg",
    1091: "phosphorus_mg",
    1106: "vitamin_a_mcg",
    1114: "vitamin_d_mcg",
    1109: "vitamin_e_mg",
    1185: "vitamin_k_mcg",
    1162: "vitamin_c_mg",
    1165: "thiamin_mg",
    1166: "riboflavin_mg",
    1167: "niacin_mg",
    1175: "vitamin_b6_mg",
    1177: "folate_mcg",
    1178: "vitamin_b12_mcg",
    1180: "choline_mg",
    1170: "pantothenic_acid_mg",
    1051: "water_g",
}
# Atwater energy ids used by Foundation foods that omit 1008.
_ENERGY_FALLBACK_IDS = (2047, 2048)
_DATA_TYPE_BONUS = {"Foundation": 0.1, "SR Legacy": 0.05}
_CONFIDENCE = ConfidenceTiers(
    exact=0.98, candidate_contains_query=0.92, query_contains_candidate=0.88
)
_BY_ID_CONFIDENCE = 0.98
_PER_GRAMS = 100.0

_logger = logging.getLogger(__name__)


@dataclass
class UsdaSource(SourceAdapter):
    """Generic and whole foods from FoodData Central."""

    fdc_client: FdcClient
    concurrency: int = 3
    batch_min_confidence: float = 0.7
    page_size: int = 5
    debug: bool = False
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.3
    source: ResolutionSource = field(default=ResolutionSource.USDA, init=False)

    async def search(
        self, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        """Search FDC and return the best-scoring food."""
        search_query = f"{qualifier} {query}" if qualifier else query
        payload = await call_upstream(
            self.source,
            f"search:{search_query}",
            lambda: self.fdc_client.search_foods(
                search_query, page_size=self.page_size
            ),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        foods = [food for food in payload.get("foods") or [] if isinstance(food, dict)]
        best = best_match(
            search_query,
            foods,
            name_of=lambda food: str(food.get("description") or ""),
            bonus=lambda food: _DATA_TYPE_BONUS.get(str(food.get("dataType")), 0.0),
        )
        if best is None:
            if self.debug:
                _logger.info("USDA search: query=%s no match", search_query)
            return None
        confidence = match_confidence(
            search_query, str(best.get("description") or ""), _CONFIDENCE
        )
        candidate = _candidate_from_food(best, confidence)
        if self.debug:
            _logger.info(
                "USDA search: query=%s match=%s confidence=%.2f",
                search_query,
                candidate.label,
                candidate.confidence,
            )
        return candidate

    async def search_many(self, queries: Sequence[str]) -> dict[str, SourceCandidate]:
        """Search several foods with bounded concurrency."""
        return await search_bounded(
            self.source,
            queries,
            self.search,
            concurrency=self.concurrency,
            minimum_confidence=self.batch_min_confidence,
        )

    async def get_by_id(self, identifier: str) -> SourceCandidate | None:
        """Fetch a food by FDC id."""
        payload = await call_upstream(
            self.source,
            f"get_food:{identifier}",
            lambda: self.fdc_client.get_food(int(identifier)),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        if not payload:
            return None
        return _candidate_from_food(payload, _BY_ID_CONFIDENCE)


def _candidate_from_food(food: dict[str, object], confidence: float) -> SourceCandidate:
    serving_grams = _serving_grams(food)
    per_100g = _extract_nutrients(food.get("foodNutrients") or [])
    return SourceCandidate(
        nutrition=per_100g.scaled(_PER_GRAMS, serving_grams),
        confidence=confidence,
        serving_grams=serving_grams,
        label=str(food.get("description") or ""),
        source=ResolutionSource.USDA,
        external_id=str(food["fdcId"]) if food.get("fdcId") is not None else None,
    )


def _serving_grams(food: dict[str, object]) -> float:
    """Return the labelled serving in grams, or the 100 g reference amount."""
    unit = str(food.get("servingSizeUnit") or "g").lower()
    size = food.get("servingSize")
    if unit in {"g", "grm"} and isinstance(size, int | float) and size > 0:
        return float(size)
    return _PER_GRAMS


def _extract_nutrients(food_nutrients: list[dict[str, object]]) -> NutrientVector:
    """Extract per-100 g nutrients from FDC nutrient rows.

    Search results carry ``nutrientId``/``value`` while food details carry
    ``nutrient.id``/``amount``.
    """
    values: dict[str, float] = {}
    fallback_energy: float | None = None
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        if amount is None:
            continue
        if nutrient_id in _ENERGY_FALLBACK_IDS:
            fallback_energy = float(amount)
            continue
        field_name = _NUTRIENT_IDS.get(nutrient_id)
        if field_name:
            values[field_name] = round_nutrient(field_name, float(amount))
    if "calories" not in values and fallback_energy is not None:
        values["calories"] = round_nutrient("calories", fallback_energy)
    return NutrientVector.from_mapping(values)
