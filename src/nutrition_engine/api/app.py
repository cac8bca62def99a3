"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from nutrition_engine.api.admin import router as admin_router
from nutrition_engine.api.models import (
    BatchResolveRequest,
    FoodPayload,
    GradeRequest,
    MealRequest,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.errors import (
    NutritionNotResolvedError,
    SourceUnavailableError,
)
from nutrition_engine.domain.foods import NormalizedFoodDescriptor
from nutrition_engine.services.glycemic import has_relevant_gi


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(NutritionNotResolvedError)
    async def not_resolved(
        request: Request, exc: NutritionNotResolvedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"No nutrition found for {exc.name}"},
        )

    @app.exception_handler(SourceUnavailableError)
    async def source_unavailable(
        request: Request, exc: SourceUnavailableError
    ) -> JSONResponse:
        logger.warning("Request failed on unavailable source %s", exc.source)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": f"Source {exc.source} is unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/v1/resolve")
    async def resolve(payload: FoodPayload, request: Request) -> dict[str, object]:
        """Resolve one food to nutrients for its estimated mass."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.resolver.resolve(_descriptor(payload))
        return {"result": jsonable_encoder(result)}

    @app.post("/v1/resolve/batch")
    async def resolve_batch(
        payload: BatchResolveRequest, request: Request
    ) -> dict[str, object]:
        """Resolve several foods; unresolved items fall back to zero nutrients."""
        state_container: AppContainer = request.app.state.container
        descriptors = [_descriptor(food) for food in payload.foods]
        results = await state_container.resolver.resolve_many(descriptors)
        return {"results": jsonable_encoder(results)}

    @app.get("/v1/barcode/{code}")
    async def barcode(code: str, request: Request) -> dict[str, object]:
        """Resolve a packaged product by barcode."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.resolver.resolve_by_barcode(code)
        if result is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No product found for barcode {code}",
            )
        return {"result": jsonable_encoder(result)}

    @app.post("/v1/grade")
    async def grade(payload: GradeRequest, request: Request) -> dict[str, object]:
        """Grade a serving from its nutrients."""
        state_container: AppContainer = request.app.state.container
        nutrition = payload.to_vector()
        food_group = payload.food_group
        gi = None
        if payload.name:
            if food_group is None:
                food_group = state_container.glycemic.infer_category(
                    payload.name, nutrition
                ).value
            if has_relevant_gi(nutrition):
                gi = state_container.glycemic.lookup(payload.name, nutrition)
        grading = state_container.grader.grade(
            nutrition,
            payload.serving_grams,
            food_group=food_group,
            is_beverage=payload.is_beverage,
            gi=gi,
        )
        response: dict[str, object] = {
            "grading": jsonable_encoder(grading),
            "gi": jsonable_encoder(gi),
        }
        if payload.focus is not None:
            response["focus_grade"] = jsonable_encoder(
                grading.focus_grades[payload.focus]
            )
        return response

    @app.post("/v1/analyze")
    async def analyze(payload: MealRequest, request: Request) -> dict[str, object]:
        """Resolve and grade every food of a meal."""
        state_container: AppContainer = request.app.state.container
        analysis = await state_container.analysis_service.analyze(
            [_descriptor(food) for food in payload.foods], payload.focus
        )
        return {"analysis": jsonable_encoder(analysis)}

    @app.post("/v1/compare")
    async def compare(payload: MealRequest, request: Request) -> dict[str, object]:
        """Rank foods for a wellness focus."""
        state_container: AppContainer = request.app.state.container
        try:
            comparison = await state_container.analysis_service.compare(
                [_descriptor(food) for food in payload.foods], payload.focus
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"comparison": jsonable_encoder(comparison)}

    return app


def _descriptor(food: FoodPayload) -> NormalizedFoodDescriptor:
    try:
        return food.to_descriptor()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
