"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder

if TYPE_CHECKING:
    from nutrition_engine.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/cache/stats", dependencies=[Depends(require_admin)])
async def cache_stats(request: Request) -> dict[str, object]:
    """Return cache size, expiry and hit statistics."""
    container: AppContainer = request.app.state.container
    return {"stats": jsonable_encoder(await container.cache.stats())}


@router.post("/cache/cleanup", dependencies=[Depends(require_admin)])
async def cache_cleanup(request: Request, limit: int = 500) -> dict[str, object]:
    """Delete up to ``limit`` expired cache entries."""
    container: AppContainer = request.app.state.container
    return {"deleted": await container.cache.cleanup_expired(limit)}


@router.delete("/cache", dependencies=[Depends(require_admin)])
async def cache_invalidate(
    request: Request,
    name: str = Query(min_length=1),
    serving_grams: float = Query(gt=0),
) -> dict[str, str]:
    """Remove the cached resolution of one food and serving."""
    container: AppContainer = request.app.state.container
    await container.cache.invalidate(name, serving_grams)
    return {"status": "ok"}
