"""Nutrition resolution across cache and external sources."""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from nutrition_engine.domain.errors import (
    NutritionNotResolvedError,
    SourceUnavailableError,
)
from nutrition_engine.domain.foods import FoodType, NormalizedFoodDescriptor
from nutrition_engine.domain.nutrients import MICRONUTRIENT_FIELDS, NutrientVector
from nutrition_engine.domain.resolution import (
    CachedEntry,
    ResolutionResult,
    ResolutionSource,
    SourceCandidate,
)
from nutrition_engine.services.cache import CacheWrite, NutritionCache, cache_key
from nutrition_engine.services.sources import SourceAdapter

_BRAND_PREFIX = re.compile(
    r"^(KIND|Clif|Luna|RXBar|Quest|ThinkThin|Nature Valley|Kashi)\s+", re.IGNORECASE
)
_BAR_SUFFIX = re.compile(r"\s+(bar|bars)$", re.IGNORECASE)

DEFAULT_SOURCE_CONCURRENCY = {
    ResolutionSource.USDA: 3,
    ResolutionSource.OPENFOODFACTS: 2,
    ResolutionSource.EDAMAM: 3,
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteStep:
    """One source attempt in a resolution cascade.

    ``qualifier_field`` names the descriptor attribute (brand or
    restaurant) prepended to the query for this step.
    """

    source: SourceAdapter
    min_confidence: float
    qualifier_field: str | None = None
    enrich: bool = False

    def qualifier_for(self, descriptor: NormalizedFoodDescriptor) -> str | None:
        if self.qualifier_field is None:
            return None
        return getattr(descriptor, self.qualifier_field) or None


Routes = dict[FoodType, tuple[RouteStep, ...]]


def default_routes(
    usda: SourceAdapter, off: SourceAdapter, edamam: SourceAdapter
) -> Routes:
    """Build the standard per-food-type cascades."""
    generic = (RouteStep(usda, 0.7), RouteStep(edamam, 0.6))
    return {
        FoodType.WHOLE_FOOD: (
            RouteStep(usda, 0.7),
            RouteStep(off, 0.7),
            RouteStep(edamam, 0.6),
        ),
        FoodType.BRANDED_PACKAGED: (
            RouteStep(off, 0.7, qualifier_field="brand_name", enrich=True),
            RouteStep(edamam, 0.6, qualifier_field="brand_name"),
        ),
        FoodType.RESTAURANT_ITEM: (
            RouteStep(edamam, 0.7, qualifier_field="restaurant_name"),
            RouteStep(off, 0.7, qualifier_field="restaurant_name"),
            *generic,
        ),
        FoodType.GENERIC_DISH: generic,
        FoodType.HOMEMADE_DISH: generic,
    }


def generic_food_name(name: str) -> str:
    """Strip well-known bar brands and a trailing "bar" from a product name."""
    generic = _BRAND_PREFIX.sub(" ", name)
    generic = _BAR_SUFFIX.sub(" ", generic)
    return generic.strip().lower()


@dataclass
class NutritionResolver:
    """Resolve food descriptors to nutrients for their estimated mass.

    ``usda``, ``off`` and ``edamam`` serve the batch pre-pass, USDA
    enrichment and barcode lookups; ``routes`` drives the per-item cascade.
    Single searches share one ``source_concurrency`` cap per source across
    every cascade, enrichment and nested decomposition of this resolver.
    """

    cache: NutritionCache
    routes: Routes
    usda: SourceAdapter
    off: SourceAdapter
    edamam: SourceAdapter
    cache_min_confidence: float = 0.6
    enrichment_min_confidence: float = 0.6
    enrichment_unset_threshold: int = 3
    ingredient_min_confidence: float = 0.5
    decomposition_penalty: float = 0.9
    debug: bool = False
    source_concurrency: dict[ResolutionSource, int] = field(
        default_factory=lambda: dict(DEFAULT_SOURCE_CONCURRENCY)
    )
    _limits: dict[ResolutionSource, asyncio.Semaphore] = field(
        default_factory=dict, init=False, repr=False
    )
    _limits_loop: asyncio.AbstractEventLoop | None = field(
        default=None, init=False, repr=False
    )

    async def resolve(self, descriptor: NormalizedFoodDescriptor) -> ResolutionResult:
        """Resolve a single food, raising when every source is exhausted."""
        cached = await self.cache.get(descriptor.name, descriptor.estimated_grams)
        if cached is not None:
            if self.debug:
                _logger.info("Resolver cache hit: name=%s", descriptor.name)
            return _from_cache(cached, descriptor.estimated_grams)

        result = await self._resolve_uncached(descriptor)
        if result is None:
            raise NutritionNotResolvedError(descriptor.name)
        if result.confidence >= self.cache_min_confidence:
            await self.cache.set(
                descriptor.name,
                result.nutrition,
                result.source,
                result.confidence,
                result.serving_grams,
                descriptor.food_type,
            )
        return result

    async def resolve_many(
        self, descriptors: Sequence[NormalizedFoodDescriptor]
    ) -> list[ResolutionResult]:
        """Resolve a batch; results line up with the input order.

        Unresolvable items come back as zero vectors with confidence 0.
        """
        if not descriptors:
            return []
        cached = await self.cache.get_many(
            [(item.name, item.estimated_grams) for item in descriptors]
        )
        results: list[ResolutionResult | None] = [None] * len(descriptors)
        misses: list[int] = []
        for index, descriptor in enumerate(descriptors):
            entry = cached.get(cache_key(descriptor.name, descriptor.estimated_grams))
            if entry is not None:
                results[index] = _from_cache(entry, descriptor.estimated_grams)
            else:
                misses.append(index)

        batch_hits = await self._search_batches(
            [descriptors[index] for index in misses]
        )

        remaining: list[int] = []
        for index in misses:
            descriptor = descriptors[index]
            candidate = batch_hits.get(descriptor.food_type, {}).get(
                _batch_query(descriptor).lower()
            )
            if candidate is None:
                remaining.append(index)
                continue
            if descriptor.food_type == FoodType.BRANDED_PACKAGED:
                candidate = await self._maybe_enrich(descriptor, candidate)
            results[index] = _to_result(candidate, descriptor.estimated_grams)

        fallbacks = await asyncio.gather(
            *(self._resolve_or_fallback(descriptors[index]) for index in remaining)
        )
        for index, result in zip(remaining, fallbacks, strict=True):
            results[index] = result

        writes: dict[str, CacheWrite] = {}
        for index in misses:
            descriptor = descriptors[index]
            result = results[index]
            if result is None or result.confidence < self.cache_min_confidence:
                continue
            writes[cache_key(descriptor.name, descriptor.estimated_grams)] = CacheWrite(
                name=descriptor.name,
                nutrition=result.nutrition,
                source=result.source,
                confidence=result.confidence,
                serving_grams=result.serving_grams,
                food_type=descriptor.food_type,
            )
        await self.cache.set_many(list(writes.values()))

        if self.debug:
            _logger.info(
                "Resolver batch: items=%s cached=%s batched=%s cascaded=%s",
                len(descriptors),
                len(descriptors) - len(misses),
                len(misses) - len(remaining),
                len(remaining),
            )
        return [result for result in results if result is not None]

    async def resolve_by_barcode(self, barcode: str) -> ResolutionResult | None:
        """Resolve a packaged product by barcode at its labelled serving."""
        candidate = await self.off.get_by_id(barcode)
        if candidate is None:
            return None
        descriptor = NormalizedFoodDescriptor(
            name=candidate.label or barcode,
            estimated_grams=candidate.serving_grams,
            food_type=FoodType.BRANDED_PACKAGED,
            barcode=barcode,
        )
        candidate = await self._maybe_enrich(descriptor, candidate)
        return _to_result(candidate, candidate.serving_grams)

    async def _resolve_uncached(
        self, descriptor: NormalizedFoodDescriptor
    ) -> ResolutionResult | None:
        if descriptor.food_type == FoodType.HOMEMADE_DISH and descriptor.ingredients:
            return await self._decompose(descriptor)

        for step in self.routes.get(descriptor.food_type, ()):
            try:
                candidate = await self._search(
                    step.source, descriptor.name, step.qualifier_for(descriptor)
                )
            except SourceUnavailableError as exc:
                _logger.warning(
                    "Resolver skipped %s for %s: %s",
                    step.source.source.value,
                    descriptor.name,
                    exc,
                )
                continue
            if candidate is None or candidate.confidence < step.min_confidence:
                continue
            if step.enrich:
                candidate = await self._maybe_enrich(descriptor, candidate)
            if self.debug:
                _logger.info(
                    "Resolver matched: name=%s source=%s confidence=%.2f",
                    descriptor.name,
                    candidate.source.value,
                    candidate.confidence,
                )
            return _to_result(candidate, descriptor.estimated_grams)
        return None

    async def _search(
        self, source: SourceAdapter, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        async with self._limit(source):
            return await source.search(query, qualifier)

    def _limit(self, source: SourceAdapter) -> asyncio.Semaphore:
        """Per-source semaphore, rebuilt when the running event loop changes."""
        loop = asyncio.get_running_loop()
        if self._limits_loop is not loop:
            self._limits = {}
            self._limits_loop = loop
        limit = self._limits.get(source.source)
        if limit is None:
            size = self.source_concurrency.get(source.source, 1)
            limit = asyncio.Semaphore(max(1, size))
            self._limits[source.source] = limit
        return limit

    async def _resolve_or_fallback(
        self, descriptor: NormalizedFoodDescriptor
    ) -> ResolutionResult:
        result = await self._resolve_uncached(descriptor)
        if result is not None:
            return result
        _logger.warning(
            "No nutrition match for %s, using empty fallback", descriptor.name
        )
        return ResolutionResult(
            nutrition=NutrientVector.zero(),
            source=ResolutionSource.AI_FALLBACK,
            confidence=0.0,
            serving_grams=descriptor.estimated_grams,
        )

    async def _search_batches(
        self, descriptors: Sequence[NormalizedFoodDescriptor]
    ) -> dict[FoodType, dict[str, SourceCandidate]]:
        """Run one batched search per source group, keyed by food type."""
        groups = (
            (self.usda, FoodType.WHOLE_FOOD),
            (self.off, FoodType.BRANDED_PACKAGED),
            (self.edamam, FoodType.RESTAURANT_ITEM),
        )
        searches = []
        for source, food_type in groups:
            queries = [
                _batch_query(descriptor)
                for descriptor in descriptors
                if descriptor.food_type == food_type
            ]
            searches.append(_search_group(source, queries))
        hits = await asyncio.gather(*searches)
        return {
            food_type: group_hits
            for (_, food_type), group_hits in zip(groups, hits, strict=True)
        }

    async def _maybe_enrich(
        self, descriptor: NormalizedFoodDescriptor, candidate: SourceCandidate
    ) -> SourceCandidate:
        """Fill unset micronutrients from a similar USDA food.

        Label fields are never overwritten; any failure keeps the primary.
        """
        unset = candidate.unset_fields
        if sum(1 for name in MICRONUTRIENT_FIELDS if name in unset) < (
            self.enrichment_unset_threshold
        ):
            return candidate
        generic_name = generic_food_name(descriptor.name)
        if not generic_name:
            return candidate
        try:
            secondary = await self._search(self.usda, generic_name)
        except SourceUnavailableError as exc:
            _logger.warning("Enrichment lookup failed for %s: %s", generic_name, exc)
            return candidate
        if secondary is None or secondary.confidence < self.enrichment_min_confidence:
            return candidate
        secondary_nutrition = secondary.nutrition.scaled(
            secondary.serving_grams, candidate.serving_grams
        )
        return SourceCandidate(
            nutrition=candidate.nutrition.merged(
                secondary_nutrition, keep=candidate.reliable_fields or ()
            ),
            confidence=min(candidate.confidence, secondary.confidence),
            serving_grams=candidate.serving_grams,
            label=candidate.label,
            source=ResolutionSource.HYBRID,
            external_id=candidate.external_id,
        )

    async def _decompose(
        self, descriptor: NormalizedFoodDescriptor
    ) -> ResolutionResult | None:
        """Sum the dish's ingredients resolved as whole foods."""
        ingredients = [
            NormalizedFoodDescriptor(
                name=ingredient.name,
                estimated_grams=ingredient.estimated_grams,
                food_type=FoodType.WHOLE_FOOD,
                unit="g",
                confidence=0.8,
            )
            for ingredient in descriptor.ingredients
        ]
        resolved = await self.resolve_many(ingredients)
        kept = [
            result
            for result in resolved
            if result.confidence >= self.ingredient_min_confidence
        ]
        if not kept:
            return None
        mean_confidence = sum(result.confidence for result in kept) / len(kept)
        return ResolutionResult(
            nutrition=NutrientVector.total(result.nutrition for result in kept),
            source=ResolutionSource.DECOMPOSED,
            confidence=mean_confidence * self.decomposition_penalty,
            serving_grams=descriptor.estimated_grams,
        )


async def _search_group(
    source: SourceAdapter, queries: Sequence[str]
) -> dict[str, SourceCandidate]:
    if not queries:
        return {}
    return await source.search_many(queries)


def _batch_query(descriptor: NormalizedFoodDescriptor) -> str:
    if descriptor.food_type == FoodType.BRANDED_PACKAGED and descriptor.brand_name:
        return f"{descriptor.brand_name} {descriptor.name}"
    if descriptor.food_type == FoodType.RESTAURANT_ITEM and descriptor.restaurant_name:
        return f"{descriptor.restaurant_name} {descriptor.name}"
    return descriptor.name


def _to_result(candidate: SourceCandidate, target_grams: float) -> ResolutionResult:
    return ResolutionResult(
        nutrition=candidate.nutrition.scaled(candidate.serving_grams, target_grams),
        source=candidate.source,
        confidence=candidate.confidence,
        serving_grams=target_grams,
    )


def _from_cache(entry: CachedEntry, target_grams: float) -> ResolutionResult:
    return ResolutionResult(
        nutrition=entry.nutrition.scaled(entry.serving_grams, target_grams),
        source=ResolutionSource.CACHE,
        confidence=entry.confidence,
        serving_grams=target_grams,
    )
