"""Supabase implementation for the nutrition resolution cache."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nutrition_engine.domain.foods import FoodType
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import CachedEntry, ResolutionSource
from nutrition_engine.services.cache import NutritionStore


@dataclass
class SupabaseNutritionCacheRepository(NutritionStore):
    """Supabase-backed store keyed by ``cache_key``."""

    client: Client
    table_name: str = "nutrition_cache"

    def get(self, key: str) -> CachedEntry | None:
        """Return a cached entry by key, if present."""
        response = (
            self.client.table(self.table_name)
            .select("*")
            .eq("cache_key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def get_many(self, keys: Sequence[str]) -> list[CachedEntry]:
        """Return cached entries for a list of keys."""
        if not keys:
            return []
        response = (
            self.client.table(self.table_name)
            .select("*")
            .in_("cache_key", list(keys))
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def put(self, entry: CachedEntry) -> None:
        """Insert or replace a cached entry."""
        self.client.table(self.table_name).upsert(
            _serialize_entry(entry), on_conflict="cache_key"
        ).execute()

    def put_many(self, entries: Sequence[CachedEntry]) -> None:
        """Insert or replace several cached entries."""
        if not entries:
            return
        self.client.table(self.table_name).upsert(
            [_serialize_entry(entry) for entry in entries], on_conflict="cache_key"
        ).execute()

    def delete(self, key: str) -> None:
        """Delete a cached entry."""
        self.client.table(self.table_name).delete().eq("cache_key", key).execute()

    def increment_hits(self, key: str) -> None:
        """Increment the hit counter for a cached entry."""
        response = (
            self.client.table(self.table_name)
            .select("hit_count")
            .eq("cache_key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return
        current = int(response.data[0].get("hit_count") or 0)
        self.client.table(self.table_name).update({"hit_count": current + 1}).eq(
            "cache_key", key
        ).execute()

    def list_entries(self) -> list[CachedEntry]:
        """Return every cached entry."""
        response = self.client.table(self.table_name).select("*").execute()
        return [_parse_entry(row) for row in response.data or []]

    def delete_expired(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` expired entries."""
        response = (
            self.client.table(self.table_name)
            .select("cache_key")
            .lt("expires_at", now.isoformat())
            .limit(limit)
            .execute()
        )
        keys = [str(row["cache_key"]) for row in response.data or []]
        if keys:
            self.client.table(self.table_name).delete().in_("cache_key", keys).execute()
        return len(keys)


def _serialize_entry(entry: CachedEntry) -> dict[str, object]:
    return {
        "cache_key": entry.key,
        "nutrition": entry.nutrition.as_dict(),
        "source": entry.source.value,
        "confidence": entry.confidence,
        "serving_grams": entry.serving_grams,
        "cached_at": entry.cached_at.isoformat(),
        "expires_at": entry.expires_at.isoformat(),
        "hit_count": entry.hit_count,
        "original_query": entry.original_query,
        "food_type": entry.food_type.value if entry.food_type else None,
    }


def _parse_entry(row: dict[str, object]) -> CachedEntry:
    """Parse a cache row into a domain model."""
    food_type_raw = row.get("food_type")
    nutrition_raw = row.get("nutrition")
    return CachedEntry(
        key=str(row["cache_key"]),
        nutrition=NutrientVector.from_mapping(
            nutrition_raw if isinstance(nutrition_raw, dict) else {}
        ),
        source=ResolutionSource(str(row.get("source", "usda"))),
        confidence=float(row.get("confidence", 0.0)),
        serving_grams=float(row.get("serving_grams", 100.0)),
        cached_at=datetime.fromisoformat(str(row["cached_at"])),
        expires_at=datetime.fromisoformat(str(row["expires_at"])),
        hit_count=int(row.get("hit_count") or 0),
        original_query=str(row.get("original_query") or ""),
        food_type=FoodType(str(food_type_raw)) if food_type_raw else None,
    )
