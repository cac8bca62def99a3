"""Edamam food database source for restaurant and prepared items."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrition_engine.adapters.edamam_client import GRAM_MEASURE_URI, EdamamClient
from nutrition_engine.domain.nutrients import NutrientVector, round_nutrient
from nutrition_engine.domain.resolution import ResolutionSource, SourceCandidate
from nutrition_engine.services.sources import (
    SourceAdapter,
    call_upstream,
    search_bounded,
)

_NUTRIENT_CODES: dict[str, str] = {
    "ENERC_KCAL": "calories",
    "PROCNT": "protein_g",
    "CHOCDF": "carbs_g",
    "FAT": "fat_g",
    "FIBTG": "fiber_g",
    "SUGAR": "sugar_g",
    "NA": "sodium_mg",
    "FASAT": "saturated_fat_g",
    "FATRN": "trans_fat_g",
    "FAMS": "monounsaturated_fat_g",
    "FAPU": "polyunsaturated_fat_g",
    "CHOLE": "cholesterol_mg",
    "K": "potassium_mg",
    "CA": "calcium_mg",
    "FE": "iron_mg",
    "MG": "magnesium_mg",
    "ZN": "zinc_mg",
    "P": "phosphorus_mg",
    "VITA_RAE": "vitamin_a_mcg",
    "VITD": "vitamin_d_mcg",
    "TOCPHA": "vitamin_e_mg",
    "VITK1": "vitamin_k_mcg",
    "VITC": "vitamin_c_mg",
    "THIA": "thiamin_mg",
    "RIBF": "riboflavin_mg",
    "NIA": "niacin_mg",
    "VITB6A": "vitamin_b6_mg",
    "FOLDFE": "folate_mcg",
    "VITB12": "vitamin_b12_mcg",
    "WATER": "water_g",
}
_PARSED_CONFIDENCE = 0.95
_HINT_CONFIDENCE = 0.80
_BY_ID_CONFIDENCE = 0.95
_SERVING_LABELS = ("serving", "cup", "piece")
_PER_GRAMS = 100.0

_logger = logging.getLogger(__name__)


@dataclass
class EdamamSource(SourceAdapter):
    """Restaurant, prepared and fallback foods from Edamam."""

    edamam_client: EdamamClient
    concurrency: int = 3
    batch_min_confidence: float = 0.7
    debug: bool = False
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.3
    source: ResolutionSource = field(default=ResolutionSource.EDAMAM, init=False)

    async def search(
        self, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        """Parse a query; a qualified query falls back to the bare one."""
        if qualifier:
            candidate = await self._parse(f"{qualifier} {query}")
            if candidate is not None:
                return candidate
        return await self._parse(query)

    async def search_many(self, queries: Sequence[str]) -> dict[str, SourceCandidate]:
        """Parse several queries with bounded concurrency."""
        return await search_bounded(
            self.source,
            queries,
            self._parse,
            concurrency=self.concurrency,
            minimum_confidence=self.batch_min_confidence,
        )

    async def get_by_id(self, identifier: str) -> SourceCandidate | None:
        """Fetch nutrients for 100 g of an Edamam food id."""
        payload = await call_upstream(
            self.source,
            f"nutrients:{identifier}",
            lambda: self.edamam_client.nutrients(
                identifier, measure_uri=GRAM_MEASURE_URI, quantity=_PER_GRAMS
            ),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        total_nutrients = payload.get("totalNutrients")
        if not total_nutrients:
            return None
        return SourceCandidate(
            nutrition=_map_nutrients(total_nutrients),
            confidence=_BY_ID_CONFIDENCE,
            serving_grams=_grams_or_default(payload.get("totalWeight")),
            label=_label_from_nutrients_payload(payload) or identifier,
            source=self.source,
            external_id=identifier,
        )

    async def _parse(self, query: str) -> SourceCandidate | None:
        payload = await call_upstream(
            self.source,
            f"parse:{query}",
            lambda: self.edamam_client.parse(query),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        candidate = _candidate_from_parse(payload)
        if self.debug:
            _logger.info(
                "Edamam parse: query=%s match=%s confidence=%s",
                query,
                candidate.label if candidate else None,
                candidate.confidence if candidate else None,
            )
        return candidate


def _candidate_from_parse(payload: dict[str, object]) -> SourceCandidate | None:
    """Prefer the parser's direct match, then its first hint."""
    parsed = payload.get("parsed") or []
    if parsed:
        item = parsed[0]
        measure = item.get("measure") or {}
        return _candidate_from_food(
            item.get("food") or {}, _PARSED_CONFIDENCE, measure.get("weight")
        )
    hints = payload.get("hints") or []
    if hints:
        hint = hints[0]
        measure = _pick_measure(hint.get("measures") or [])
        return _candidate_from_food(
            hint.get("food") or {}, _HINT_CONFIDENCE, measure.get("weight")
        )
    return None


def _pick_measure(measures: list[dict[str, object]]) -> dict[str, object]:
    for measure in measures:
        label = str(measure.get("label") or "").lower()
        if any(hint in label for hint in _SERVING_LABELS):
            return measure
    return measures[0] if measures else {}


def _candidate_from_food(
    food: dict[str, object], confidence: float, weight: object
) -> SourceCandidate:
    """Build a candidate from a parser food, whose nutrients are per 100 g."""
    serving_grams = _grams_or_default(weight)
    per_100g = _map_nutrients(food.get("nutrients") or {})
    food_id = food.get("foodId")
    return SourceCandidate(
        nutrition=per_100g.scaled(_PER_GRAMS, serving_grams),
        confidence=confidence,
        serving_grams=serving_grams,
        label=str(food.get("label") or ""),
        source=ResolutionSource.EDAMAM,
        external_id=str(food_id) if food_id else None,
    )


def _grams_or_default(weight: object) -> float:
    if isinstance(weight, int | float) and weight > 0:
        return float(weight)
    return _PER_GRAMS


def _map_nutrients(nutrients: dict[str, object]) -> NutrientVector:
    """Map Edamam nutrient codes; values are numbers or quantity objects."""
    values: dict[str, float] = {}
    for code, field_name in _NUTRIENT_CODES.items():
        raw = nutrients.get(code)
        if isinstance(raw, dict):
            raw = raw.get("quantity")
        if isinstance(raw, int | float):
            values[field_name] = round_nutrient(field_name, float(raw))
    return NutrientVector.from_mapping(values)


def _label_from_nutrients_payload(payload: dict[str, object]) -> str | None:
    for ingredient in payload.get("ingredients") or []:
        for parsed in ingredient.get("parsed") or []:
            food = parsed.get("food")
            if food:
                return str(food)
    return None
