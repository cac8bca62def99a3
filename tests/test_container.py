"""Tests for container wiring."""

import asyncio

import pytest

from nutrition_engine.containers import build_container, build_store
from nutrition_engine.services.cache import InMemoryNutritionStore


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.cache.store, InMemoryNutritionStore)
    assert container.analysis_service.resolver is container.resolver
    assert container.grader.gi_adjustment.min_confidence == settings.gi_min_confidence
    asyncio.run(container.close_resources())


def test_build_store_rejects_unknown_backend(settings) -> None:
    with pytest.raises(ValueError):
        build_store(settings.model_copy(update={"cache_backend": "redis"}))


def test_supabase_store_requires_credentials(settings) -> None:
    incomplete = settings.model_copy(
        update={"cache_backend": "supabase", "supabase_service_key": None}
    )

    with pytest.raises(ValueError):
        build_store(incomplete)
