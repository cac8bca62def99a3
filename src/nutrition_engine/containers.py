"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_engine.adapters.edamam_client import HttpxEdamamClient
from nutrition_engine.adapters.fdc_client import HttpxFdcClient
from nutrition_engine.adapters.off_client import HttpxOpenFoodFactsClient
from nutrition_engine.adapters.supabase_nutrition_cache_repository import (
    SupabaseNutritionCacheRepository,
)
from nutrition_engine.config import Settings
from nutrition_engine.services.analysis import AnalysisService
from nutrition_engine.services.cache import (
    InMemoryNutritionStore,
    NutritionCache,
    NutritionStore,
)
from nutrition_engine.services.edamam_source import EdamamSource
from nutrition_engine.services.glycemic import GlycemicLookup
from nutrition_engine.services.grading import DeterministicGrader
from nutrition_engine.services.off_source import OpenFoodFactsSource
from nutrition_engine.services.resolver import NutritionResolver, default_routes
from nutrition_engine.services.usda_source import UsdaSource


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: NutritionCache
    resolver: NutritionResolver
    glycemic: GlycemicLookup
    grader: DeterministicGrader
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> NutritionStore:
    """Create the cache store selected by ``cache_backend``."""
    if settings.cache_backend == "memory":
        return InMemoryNutritionStore()
    if settings.cache_backend != "supabase":
        raise ValueError(f"Unknown cache backend: {settings.cache_backend}")
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase cache backend requires URL and service key")
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    return SupabaseNutritionCacheRepository(
        supabase_client, table_name=settings.cache_table
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.request_timeout_seconds
    retry = {
        "retry_attempts": resolved_settings.source_retry_attempts,
        "retry_delay_seconds": resolved_settings.source_retry_delay_seconds,
    }
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout=timeout,
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout=timeout,
    )
    edamam_client = HttpxEdamamClient.create(
        app_id=resolved_settings.edamam_app_id,
        app_key=resolved_settings.edamam_app_key,
        base_url=resolved_settings.edamam_base_url,
        timeout=timeout,
    )
    cache = NutritionCache(
        store=build_store(resolved_settings),
        database_ttl_days=resolved_settings.cache_ttl_days,
        fallback_ttl_days=resolved_settings.fallback_cache_ttl_days,
    )
    usda = UsdaSource(
        fdc_client,
        concurrency=resolved_settings.usda_concurrency,
        debug=resolved_settings.debug,
        **retry,
    )
    off = OpenFoodFactsSource(
        off_client,
        concurrency=resolved_settings.off_concurrency,
        debug=resolved_settings.debug,
        **retry,
    )
    edamam = EdamamSource(
        edamam_client,
        concurrency=resolved_settings.edamam_concurrency,
        debug=resolved_settings.debug,
        **retry,
    )
    resolver = NutritionResolver(
        cache=cache,
        routes=default_routes(usda, off, edamam),
        usda=usda,
        off=off,
        edamam=edamam,
        source_concurrency={
            usda.source: usda.concurrency,
            off.source: off.concurrency,
            edamam.source: edamam.concurrency,
        },
        debug=resolved_settings.debug,
    )
    glycemic = GlycemicLookup()
    grader = DeterministicGrader(gi_adjustment=resolved_settings.gi_adjustment())
    analysis_service = AnalysisService(
        resolver=resolver,
        glycemic=glycemic,
        grader=grader,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await cache.drain()
        await fdc_client.close()
        await off_client.close()
        await edamam_client.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        resolver=resolver,
        glycemic=glycemic,
        grader=grader,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
