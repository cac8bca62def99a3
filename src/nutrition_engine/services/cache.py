"""Resolution cache with source-dependent TTLs."""

import asyncio
import logging
import re
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import partial
from typing import Protocol

from nutrition_engine.domain.foods import FoodType
from nutrition_engine.domain.nutrients import NutrientVector
from nutrition_engine.domain.resolution import (
    CachedEntry,
    CacheStats,
    ResolutionSource,
)

_logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_BATCH_CHUNK_SIZE = 100
_DEFAULT_SERVING_GRAMS = 100
_SERVING_TOLERANCE_GRAMS = 10


class NutritionStore(Protocol):
    """Persistence interface for cached resolutions."""

    def get(self, key: str) -> CachedEntry | None:
        """Return a stored entry regardless of expiry."""

    def get_many(self, keys: Sequence[str]) -> list[CachedEntry]:
        """Return stored entries for the keys that exist."""

    def put(self, entry: CachedEntry) -> None:
        """Insert or replace an entry."""

    def put_many(self, entries: Sequence[CachedEntry]) -> None:
        """Insert or replace several entries in one write."""

    def delete(self, key: str) -> None:
        """Delete an entry if present."""

    def increment_hits(self, key: str) -> None:
        """Increment the hit counter for an entry."""

    def list_entries(self) -> list[CachedEntry]:
        """Return all stored entries."""

    def delete_expired(self, now: datetime, limit: int) -> int:
        """Delete up to ``limit`` entries that expired before ``now``."""


@dataclass
class InMemoryNutritionStore(NutritionStore):
    """Dictionary-backed store for local runs and tests."""

    entries: dict[str, CachedEntry] = field(default_factory=dict)

    def get(self, key: str) -> CachedEntry | None:
        return self.entries.get(key)

    def get_many(self, keys: Sequence[str]) -> list[CachedEntry]:
        return [self.entries[key] for key in keys if key in self.entries]

    def put(self, entry: CachedEntry) -> None:
        self.entries[entry.key] = entry

    def put_many(self, entries: Sequence[CachedEntry]) -> None:
        for entry in entries:
            self.entries[entry.key] = entry

    def delete(self, key: str) -> None:
        self.entries.pop(key, None)

    def increment_hits(self, key: str) -> None:
        entry = self.entries.get(key)
        if entry is None:
            return
        self.entries[key] = CachedEntry(
            key=entry.key,
            nutrition=entry.nutrition,
            source=entry.source,
            confidence=entry.confidence,
            serving_grams=entry.serving_grams,
            cached_at=entry.cached_at,
            expires_at=entry.expires_at,
            hit_count=entry.hit_count + 1,
            original_query=entry.original_query,
            food_type=entry.food_type,
        )

    def list_entries(self) -> list[CachedEntry]:
        return list(self.entries.values())

    def delete_expired(self, now: datetime, limit: int) -> int:
        expired = [key for key, entry in self.entries.items() if entry.expires_at < now]
        for key in expired[:limit]:
            del self.entries[key]
        return min(len(expired), limit)


@dataclass(frozen=True)
class CacheWrite:
    """Pending cache write for a batch."""

    name: str
    nutrition: NutrientVector
    source: ResolutionSource
    confidence: float
    serving_grams: float
    food_type: FoodType | None = None


def cache_key(name: str, serving_grams: float) -> str:
    """Build the cache key for a food name and serving mass."""
    normalized = _PUNCTUATION.sub("", name.lower().strip())
    normalized = _WHITESPACE.sub(" ", normalized).strip()
    if abs(serving_grams - _DEFAULT_SERVING_GRAMS) > _SERVING_TOLERANCE_GRAMS:
        return f"{normalized}_{round(serving_grams)}g"
    return normalized


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class NutritionCache:
    """Best-effort cache in front of the nutrition sources.

    Store failures are logged and treated as misses or no-ops. Hit
    counting and purging of expired entries run as detached tasks that
    never affect the value returned to the caller; ``drain`` awaits them.
    """

    store: NutritionStore
    database_ttl_days: int = 30
    fallback_ttl_days: int = 7
    clock: Callable[[], datetime] = _utcnow
    _pending: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    async def get(self, name: str, serving_grams: float) -> CachedEntry | None:
        """Return a live cached entry, if any."""
        key = cache_key(name, serving_grams)
        try:
            entry = await asyncio.to_thread(self.store.get, key)
        except Exception:
            _logger.exception("Cache read failed for %s", key)
            return None
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            self._detach(self.store.delete, key, action="purge")
            return None
        self._detach(self.store.increment_hits, key, action="hit count")
        return entry

    async def get_many(
        self, items: Sequence[tuple[str, float]]
    ) -> dict[str, CachedEntry]:
        """Return live entries keyed by cache key; missing keys are omitted."""
        keys = list(dict.fromkeys(cache_key(name, grams) for name, grams in items))
        now = self.clock()
        found: dict[str, CachedEntry] = {}
        for start in range(0, len(keys), _BATCH_CHUNK_SIZE):
            chunk = keys[start : start + _BATCH_CHUNK_SIZE]
            for entry in await self._read_chunk(chunk):
                if entry.is_expired(now):
                    self._detach(self.store.delete, entry.key, action="purge")
                    continue
                found[entry.key] = entry
                self._detach(self.store.increment_hits, entry.key, action="hit count")
        return found

    async def set(  # noqa: PLR0913
        self,
        name: str,
        nutrition: NutrientVector,
        source: ResolutionSource,
        confidence: float,
        serving_grams: float,
        food_type: FoodType | None = None,
    ) -> None:
        """Store a resolution with a TTL chosen by source."""
        entry = self._build_entry(
            CacheWrite(name, nutrition, source, confidence, serving_grams, food_type)
        )
        try:
            await asyncio.to_thread(self.store.put, entry)
        except Exception:
            _logger.exception("Cache write failed for %s", entry.key)

    async def set_many(self, writes: Sequence[CacheWrite]) -> None:
        """Store several resolutions in a single write."""
        if not writes:
            return
        entries = [self._build_entry(write) for write in writes]
        try:
            await asyncio.to_thread(self.store.put_many, entries)
        except Exception:
            _logger.exception("Batch cache write failed for %s entries", len(entries))

    async def invalidate(self, name: str, serving_grams: float) -> None:
        """Remove a single cached resolution."""
        key = cache_key(name, serving_grams)
        try:
            await asyncio.to_thread(self.store.delete, key)
        except Exception:
            _logger.exception("Cache invalidate failed for %s", key)

    async def stats(self) -> CacheStats:
        """Summarize cache contents."""
        entries = await asyncio.to_thread(self.store.list_entries)
        now = self.clock()
        total = len(entries)
        return CacheStats(
            total_entries=total,
            expired_entries=sum(1 for entry in entries if entry.is_expired(now)),
            average_confidence=(
                round(sum(entry.confidence for entry in entries) / total, 3)
                if total
                else 0.0
            ),
            total_hits=sum(entry.hit_count for entry in entries),
            by_source=dict(Counter(entry.source.value for entry in entries)),
        )

    async def cleanup_expired(self, limit: int = 500) -> int:
        """Delete expired entries and return how many were removed."""
        deleted = await asyncio.to_thread(
            self.store.delete_expired, self.clock(), limit
        )
        _logger.info("Cache cleanup removed %s expired entries", deleted)
        return deleted

    async def drain(self) -> None:
        """Wait for detached hit-count and purge tasks to finish."""
        while self._pending:
            pending = list(self._pending)
            await asyncio.gather(*pending, return_exceptions=True)
            self._pending.difference_update(pending)

    async def _read_chunk(self, keys: list[str]) -> list[CachedEntry]:
        try:
            return await asyncio.to_thread(self.store.get_many, keys)
        except Exception as exc:
            _logger.warning(
                "Batch cache read failed for %s keys, reading individually: %s",
                len(keys),
                exc,
            )
        entries: list[CachedEntry] = []
        for key in keys:
            try:
                entry = await asyncio.to_thread(self.store.get, key)
            except Exception:
                _logger.exception("Cache read failed for %s", key)
                continue
            if entry is not None:
                entries.append(entry)
        return entries

    def _build_entry(self, write: CacheWrite) -> CachedEntry:
        now = self.clock()
        ttl_days = (
            self.fallback_ttl_days
            if write.source == ResolutionSource.AI_FALLBACK
            else self.database_ttl_days
        )
        return CachedEntry(
            key=cache_key(write.name, write.serving_grams),
            nutrition=write.nutrition,
            source=write.source,
            confidence=write.confidence,
            serving_grams=write.serving_grams,
            cached_at=now,
            expires_at=now + timedelta(days=ttl_days),
            hit_count=0,
            original_query=write.name,
            food_type=write.food_type,
        )

    def _detach(self, func: Callable[[str], None], key: str, *, action: str) -> None:
        task = asyncio.get_running_loop().create_task(asyncio.to_thread(func, key))
        self._pending.add(task)
        task.add_done_callback(partial(self._on_detached_done, key=key, action=action))

    def _on_detached_done(
        self, task: "asyncio.Task[None]", *, key: str, action: str
    ) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("Cache %s failed for %s: %s", action, key, exc)
