"""Edamam Food Database API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

GRAM_MEASURE_URI = "http://www.edamam.com/ontologies/edamam.owl#Measure_gram"


class EdamamClient(Protocol):
    """Interface for Edamam food database calls."""

    async def parse(self, ingredient: str) -> dict[str, object]:
        """Run the food parser for a free-text ingredient."""

    async def nutrients(
        self, food_id: str, measure_uri: str = GRAM_MEASURE_URI, quantity: float = 1
    ) -> dict[str, object]:
        """Return total nutrients for a food id and measure."""


@dataclass
class HttpxEdamamClient(EdamamClient):
    """HTTPX-backed Edamam client."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, app_id: str, app_key: str, base_url: str, timeout: float = 15
    ) -> "HttpxEdamamClient":
        """Create an Edamam client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def parse(self, ingredient: str) -> dict[str, object]:
        """Parse a free-text ingredient into matched foods."""
        response = await self.http_client.get(
            f"{self.base_url}/parser",
            params={"ingr": ingredient, "app_id": self.app_id, "app_key": self.app_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def nutrients(
        self, food_id: str, measure_uri: str = GRAM_MEASURE_URI, quantity: float = 1
    ) -> dict[str, object]:
        """Fetch nutrients for a specific food and measure."""
        response = await self.http_client.post(
            f"{self.base_url}/nutrients",
            params={"app_id": self.app_id, "app_key": self.app_key},
            json={
                "ingredients": [
                    {"quantity": quantity, "measureURI": measure_uri, "foodId": food_id}
                ]
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
