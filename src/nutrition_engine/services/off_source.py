"""OpenFoodFacts nutrition source for packaged products."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrition_engine.adapters.off_client import OpenFoodFactsClient
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

# (nutriment key, vector field, unit multiplier)
_NUTRIMENTS: tuple[tuple[str, str, float], ...] = (
    ("energy-kcal_100g", "calories", 1),
    ("proteins_100g", "protein_g", 1),
    ("carbohydrates_100g", "carbs_g", 1),
    ("fat_100g", "fat_g", 1),
    ("fiber_100g", "fiber_g", 1),
    ("sugars_100g", "sugar_g", 1),
    ("sodium_100g", "sodium_mg", 1000),
    ("saturated-fat_100g", "saturated_fat_g", 1),
    ("trans-fat_100g", "trans_fat_g", 1),
    ("cholesterol_100g", "cholesterol_mg", 1000),
    ("potassium_100g", "potassium_mg", 1000),
    ("calcium_100g", "calcium_mg", 1000),
    ("iron_100g", "iron_mg", 1000),
    ("vitamin-d_100g", "vitamin_d_mcg", 1_000_000),
)
_CONFIDENCE = ConfidenceTiers(
    exact=0.95, candidate_contains_query=0.88, query_contains_candidate=0.88
)
_BARCODE_CONFIDENCE = 0.95
_COMPLETENESS_STEP = 0.005
_COMPLETENESS_CAP = 0.1
_PER_GRAMS = 100.0

_logger = logging.getLogger(__name__)


@dataclass
class OpenFoodFactsSource(SourceAdapter):
    """Branded products with label-derived nutrients."""

    off_client: OpenFoodFactsClient
    concurrency: int = 2
    batch_min_confidence: float = 0.7
    page_size: int = 5
    debug: bool = False
    retry_attempts: int = 0
    retry_delay_seconds: float = 0.3
    source: ResolutionSource = field(default=ResolutionSource.OPENFOODFACTS, init=False)

    async def search(
        self, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        """Search products, preferring the most complete close match."""
        search_query = f"{qualifier} {query}" if qualifier else query
        payload = await call_upstream(
            self.source,
            f"search:{search_query}",
            lambda: self.off_client.search_products(
                search_query, page_size=self.page_size
            ),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        products = [
            product
            for product in payload.get("products") or []
            if isinstance(product, dict)
            and product.get("product_name")
            and product.get("nutriments")
        ]
        best = best_match(
            search_query,
            products,
            name_of=lambda product: str(product["product_name"]),
            bonus=_completeness_bonus,
        )
        if best is None:
            if self.debug:
                _logger.info("OFF search: query=%s no match", search_query)
            return None
        confidence = match_confidence(
            search_query, str(best["product_name"]), _CONFIDENCE
        )
        candidate = _candidate_from_product(best, confidence)
        if self.debug:
            _logger.info(
                "OFF search: query=%s match=%s confidence=%.2f",
                search_query,
                candidate.label,
                candidate.confidence,
            )
        return candidate

    async def search_many(self, queries: Sequence[str]) -> dict[str, SourceCandidate]:
        """Search several products with bounded concurrency."""
        return await search_bounded(
            self.source,
            queries,
            self.search,
            concurrency=self.concurrency,
            minimum_confidence=self.batch_min_confidence,
        )

    async def get_by_id(self, identifier: str) -> SourceCandidate | None:
        """Look up a product by barcode."""
        payload = await call_upstream(
            self.source,
            f"barcode:{identifier}",
            lambda: self.off_client.get_product(identifier),
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(product, dict):
            return None
        return _candidate_from_product(product, _BARCODE_CONFIDENCE)


def _completeness_bonus(product: dict[str, object]) -> float:
    nutriments = product.get("nutriments") or {}
    return min(_COMPLETENESS_CAP, len(nutriments) * _COMPLETENESS_STEP)


def _candidate_from_product(
    product: dict[str, object], confidence: float
) -> SourceCandidate:
    per_100g, reliable = _map_nutriments(product.get("nutriments") or {})
    serving_grams = _serving_grams(product.get("serving_quantity"))
    code = product.get("code")
    return SourceCandidate(
        nutrition=per_100g.scaled(_PER_GRAMS, serving_grams),
        confidence=confidence,
        serving_grams=serving_grams,
        label=str(product.get("product_name") or code or ""),
        source=ResolutionSource.OPENFOODFACTS,
        external_id=str(code) if code else None,
        reliable_fields=reliable,
    )


def _map_nutriments(
    nutriments: dict[str, object],
) -> tuple[NutrientVector, frozenset[str]]:
    """Map label nutriments to a vector and the set of fields present."""
    values: dict[str, float] = {}
    for key, field_name, multiplier in _NUTRIMENTS:
        raw = nutriments.get(key)
        if raw is None or raw == "":
            continue
        try:
            amount = float(raw)
        except (TypeError, ValueError):
            continue
        values[field_name] = round_nutrient(field_name, amount * multiplier)
    return NutrientVector.from_mapping(values), frozenset(values)


def _serving_grams(raw: object) -> float:
    try:
        grams = float(raw) if raw not in (None, "") else 0.0
    except (TypeError, ValueError):
        grams = 0.0
    return grams if grams > 0 else _PER_GRAMS
