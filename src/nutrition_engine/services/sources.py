"""Shared interface and helpers for nutrition sources."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

import httpx

from nutrition_engine.domain.errors import SourceUnavailableError
from nutrition_engine.domain.resolution import ResolutionSource, SourceCandidate

_logger = logging.getLogger(__name__)


class SourceAdapter(Protocol):
    """Free-text nutrition lookup against one external database."""

    source: ResolutionSource

    async def search(
        self, query: str, qualifier: str | None = None
    ) -> SourceCandidate | None:
        """Return the best candidate for a query, or None when nothing matches.

        Raises SourceUnavailableError when the upstream call fails.
        """

    async def search_many(self, queries: Sequence[str]) -> dict[str, SourceCandidate]:
        """Search several queries; results are keyed by lower-cased query."""

    async def get_by_id(self, identifier: str) -> SourceCandidate | None:
        """Fetch a specific record by the source's own identifier."""


def status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


async def call_upstream(
    source: ResolutionSource,
    action: str,
    func: Callable[[], Awaitable[dict[str, object]]],
    *,
    retry_attempts: int = 0,
    retry_delay_seconds: float = 0.3,
) -> dict[str, object]:
    """Call an upstream API, optionally retrying after a short delay.

    Transport and decoding failures that survive the retries surface as
    SourceUnavailableError.
    """
    attempt = 0
    while True:
        try:
            return await func()
        except (httpx.HTTPError, ValueError) as exc:
            attempt += 1
            _logger.warning(
                "Source %s %s failed (attempt %s/%s, status=%s): %s",
                source.value,
                action,
                attempt,
                retry_attempts + 1,
                status_code_from_exception(exc),
                exc,
            )
            if attempt > retry_attempts:
                raise SourceUnavailableError(source.value, str(exc)) from exc
            await asyncio.sleep(retry_delay_seconds)


async def search_bounded(
    source: ResolutionSource,
    queries: Sequence[str],
    search: Callable[[str], Awaitable[SourceCandidate | None]],
    *,
    concurrency: int,
    minimum_confidence: float,
) -> dict[str, SourceCandidate]:
    """Search many queries with at most ``concurrency`` calls in flight.

    Failed queries are logged and left out; only candidates at or above
    ``minimum_confidence`` are returned.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def run(query: str) -> tuple[str, SourceCandidate | None]:
        async with semaphore:
            try:
                return query, await search(query)
            except SourceUnavailableError as exc:
                _logger.warning(
                    "Batch %s lookup skipped for %s: %s", source.value, query, exc
                )
                return query, None

    unique = list(dict.fromkeys(queries))
    results = await asyncio.gather(*(run(query) for query in unique))
    return {
        query.lower(): candidate
        for query, candidate in results
        if candidate is not None and candidate.confidence >= minimum_confidence
    }
