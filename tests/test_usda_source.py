"""Tests for the USDA FoodData Central source."""

import asyncio
from dataclasses import dataclass

import httpx
import pytest

from nutrition_engine.domain.errors import SourceUnavailableError
from nutrition_engine.domain.resolution import ResolutionSource
from nutrition_engine.services.usda_source import UsdaSource
from tests.conftest import FakeFdcClient

BANANA_SEARCH = {
    "foods": [
        {
            "fdcId": 1,
            "description": "Banana bread",
            "dataType": "Branded",
            "foodNutrients": [{"nutrientId": 1008, "value": 326}],
        },
        {
            "fdcId": 2,
            "description": "Bananas, raw",
            "dataType": "SR Legacy",
            "foodNutrients": [
                {"nutrientId": 1008, "value": 89},
                {"nutrientId": 1003, "value": 1.1},
                {"nutrientId": 1005, "value": 22.8},
                {"nutrientId": 1092, "value": 358},
            ],
        },
    ]
}


@dataclass
class FailingFdcClient(FakeFdcClient):
    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        raise httpx.ConnectError("connection refused")


def test_search_picks_best_food_and_scores_match() -> None:
    client = FakeFdcClient(search_payload=BANANA_SEARCH)
    source = UsdaSource(client)

    candidate = asyncio.run(source.search("banana"))

    assert candidate is not None
    assert candidate.source == ResolutionSource.USDA
    assert candidate.label == "Bananas, raw"
    assert candidate.external_id == "2"
    assert candidate.confidence == 0.92
    assert candidate.serving_grams == 100
    assert candidate.nutrition.calories == 89
    assert candidate.nutrition.potassium_mg == 358


def test_search_scales_labelled_gram_serving() -> None:
    client = FakeFdcClient(
        search_payload={
            "foods": [
                {
                    "fdcId": 9,
                    "description": "Granola",
                    "dataType": "Branded",
                    "servingSize": 40,
                    "servingSizeUnit": "g",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 471},
                        {"nutrientId": 1003, "value": 10},
                    ],
                }
            ]
        }
    )
    source = UsdaSource(client)

    candidate = asyncio.run(source.search("granola"))

    assert candidate is not None
    assert candidate.confidence == 0.98
    assert candidate.serving_grams == 40
    assert candidate.nutrition.calories == 188
    assert candidate.nutrition.protein_g == 4.0


def test_search_uses_atwater_energy_when_calories_missing() -> None:
    client = FakeFdcClient(
        search_payload={
            "foods": [
                {
                    "fdcId": 5,
                    "description": "Lentils, dry",
                    "dataType": "Foundation",
                    "foodNutrients": [{"nutrientId": 2047, "value": 352}],
                }
            ]
        }
    )

    candidate = asyncio.run(UsdaSource(client).search("lentils"))

    assert candidate is not None
    assert candidate.nutrition.calories == 352


def test_search_returns_none_without_match() -> None:
    client = FakeFdcClient(search_payload=BANANA_SEARCH)

    assert asyncio.run(UsdaSource(client).search("steak")) is None


def test_search_many_filters_by_batch_confidence() -> None:
    client = FakeFdcClient(search_payload=BANANA_SEARCH)
    source = UsdaSource(client)

    results = asyncio.run(source.search_many(["Banana", "steak", "Banana"]))

    assert set(results) == {"banana"}
    assert client.queries.count("Banana") == 1


def test_get_by_id_reads_detail_nutrients() -> None:
    client = FakeFdcClient(
        food_payload={
            "fdcId": 3,
            "description": "Apples, raw",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 52},
                {"nutrient": {"id": 1079}, "amount": 2.4},
            ],
        }
    )

    candidate = asyncio.run(UsdaSource(client).get_by_id("3"))

    assert candidate is not None
    assert candidate.confidence == 0.98
    assert candidate.nutrition.fiber_g == 2.4
    assert client.queries == ["id:3"]


def test_transport_failure_raises_source_unavailable() -> None:
    source = UsdaSource(FailingFdcClient())

    with pytest.raises(SourceUnavailableError) as excinfo:
        asyncio.run(source.search("banana"))

    assert excinfo.value.source == "usda"


def test_search_many_skips_failed_queries() -> None:
    source = UsdaSource(FailingFdcClient())

    assert asyncio.run(source.search_many(["banana"])) == {}
