"""Shared test fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from nutrition_engine.adapters.edamam_client import GRAM_MEASURE_URI, EdamamClient
from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.adapters.off_client import OpenFoodFactsClient
from nutrition_engine.config import Settings
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.errors import SourceUnavailableError
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import ResolutionSource, SourceCandidate
from nutrition_engine.services.analysis import AnalysisService
from nutrition_engine.services.cache import InMemoryNutritionStore, NutritionCache
from nutrition_engine.services.glycemic import GlycemicLookup
from nutrition_engine.services.grading import DeterministicGrader
from nutrition_engine.services.resolver import NutritionResolver, default_routes
from nutrition_engine.services.sources import SourceAdapter

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@dataclass
class FixedClock:
    """Clock that only moves when told to."""

    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now


def make_candidate(  # noqa: PLR0913
    source: ResolutionSource,
    confidence: float = 0.9,
    serving_grams: float = 100,
    label: str = "food",
    reliable_fields: frozenset[str] | None = None,
    **nutrients: float,
) -> SourceCandidate:
    return SourceCandidate(
        nutrition=NutrientVector(**nutrients),
        confidence=confidence,
        serving_grams=serving_grams,
        label=label,
        source=source,
        reliable_fields=reliable_fields,
    )


@dataclass
class FakeSource(SourceAdapter):
    """Source answering from a dictionary keyed by lower-cased query."""

    source: ResolutionSource
    results: dict[str, SourceCandidate] = field(default_factory=dict)
    by_id: dict[str, SourceCandidate] = field(default_factory=dict)
    unavailable: bool = False
    batch_min_confidence: float = 0.7
    calls: list[str] = field(default_factory=list)
    batch_calls: list[list[str]] = field(default_factory=list)
    delay: float = 0.0
    in_flight: int = 0
    peak_in_flight: int = 0

    async def search(
        self, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        search_query = f"{qualifier} {query}" if qualifier else query
        self.calls.append(search_query)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.unavailable:
                raise SourceUnavailableError(self.source.value, "down")
            return self.results.get(search_query.lower())
        finally:
            self.in_flight -= 1

    async def search_many(self, queries: Sequence[str]) -> dict[str, SourceCandidate]:
        self.batch_calls.append(list(queries))
        if self.unavailable:
            return {}
        return {
            query.lower(): self.results[query.lower()]
            for query in queries
            if query.lower() in self.results
            and self.results[query.lower()].confidence >= self.batch_min_confidence
        }

    async def get_by_id(self, identifier: str) -> SourceCandidate | None:
        self.calls.append(f"id:{identifier}")
        if self.unavailable:
            raise SourceUnavailableError(self.source.value, "down")
        return self.by_id.get(identifier)


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(default_factory=lambda: {"foods": []})
    food_payload: dict[str, object] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.queries.append(query)
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.queries.append(f"id:{fdc_id}")
        return self.food_payload


@dataclass
class FakeOffClient(OpenFoodFactsClient):
    """Fake OpenFoodFacts client with in-memory responses."""

    search_payload: dict[str, object] = field(default_factory=lambda: {"products": []})
    product_payload: dict[str, object] = field(default_factory=lambda: {"status": 0})
    queries: list[str] = field(default_factory=list)

    async def search_products(
        self, query: str, page_size: int = 5
    ) -> dict[str, object]:
        self.queries.append(query)
        return self.search_payload

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.queries.append(f"barcode:{barcode}")
        return self.product_payload


@dataclass
class FakeEdamamClient(EdamamClient):
    """Fake Edamam client answering parse calls per ingredient."""

    parse_payloads: dict[str, dict[str, object]] = field(default_factory=dict)
    nutrients_payload: dict[str, object] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)

    async def parse(self, ingredient: str) -> dict[str, object]:
        self.queries.append(ingredient)
        return self.parse_payloads.get(ingredient, {"parsed": [], "hints": []})

    async def nutrients(
        self, food_id: str, measure_uri: str = GRAM_MEASURE_URI, quantity: float = 1
    ) -> dict[str, object]:
        self.queries.append(f"nutrients:{food_id}:{quantity}")
        return self.nutrients_payload


@dataclass
class Sources:
    usda: FakeSource
    off: FakeSource
    edamam: FakeSource


def build_resolver(
    sources: Sources, cache: NutritionCache | None = None
) -> NutritionResolver:
    return NutritionResolver(
        cache=cache or NutritionCache(InMemoryNutritionStore(), clock=FixedClock()),
        routes=default_routes(sources.usda, sources.off, sources.edamam),
        usda=sources.usda,
        off=sources.off,
        edamam=sources.edamam,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        edamam_app_id="edamam-id",
        edamam_app_key="edamam-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        cache_backend="memory",
        admin_token="admin-token",
    )


@pytest.fixture
def sources() -> Sources:
    return Sources(
        usda=FakeSource(ResolutionSource.USDA),
        off=FakeSource(ResolutionSource.OPENFOODFACTS),
        edamam=FakeSource(ResolutionSource.EDAMAM),
    )


@pytest.fixture
def nutrition_cache() -> NutritionCache:
    return NutritionCache(InMemoryNutritionStore(), clock=FixedClock())


@pytest.fixture
def container(
    settings: Settings, sources: Sources, nutrition_cache: NutritionCache
) -> AppContainer:
    resolver = build_resolver(sources, nutrition_cache)
    glycemic = GlycemicLookup()
    grader = DeterministicGrader(gi_adjustment=settings.gi_adjustment())
    analysis_service = AnalysisService(
        resolver=resolver, glycemic=glycemic, grader=grader
    )

    async def close_resources() -> None:
        await nutrition_cache.drain()

    return AppContainer(
        settings=settings,
        cache=nutrition_cache,
        resolver=resolver,
        glycemic=glycemic,
        grader=grader,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
