"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from diet_planner.api.admin import router as admin_router
from diet_planner.api.models import PlanRequest, RecommendationRequest, ScoreRequest
from diet_planner.api.serializers import (
    serialize_plan_result,
    serialize_recommendation,
    serialize_scored,
)
from diet_planner.app_logging import configure_logging
from diet_planner.containers import AppContainer
from diet_planner.domain.errors import (
    FoodNotFoundError,
    ProfileValidationError,
    UnknownFrameworkError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.catalog.load()
        except Exception:
            logger.exception("Failed to load food catalog")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ProfileValidationError)
    async def profile_error(
        request: Request, exc: ProfileValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc),
                "framework": exc.framework,
                "errors": exc.errors,
            },
        )

    @app.exception_handler(UnknownFrameworkError)
    async def unknown_framework(
        request: Request, exc: UnknownFrameworkError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(FoodNotFoundError)
    async def food_not_found(request: Request, exc: FoodNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/frameworks")
    async def list_frameworks(request: Request) -> dict[str, object]:
        """Return the registered frameworks and their tier labels."""
        state_container: AppContainer = request.app.state.container
        return {
            "frameworks": [
                {
                    "name": rule_set.name,
                    "display_name": rule_set.display_name,
                    "aliases": list(rule_set.aliases),
                    "tiers": list(rule_set.tiering.labels),
                }
                for rule_set in state_container.registry
            ]
        }

    @app.post("/frameworks/{framework}/recommendations")
    async def recommendations(
        framework: str, body: RecommendationRequest, request: Request
    ) -> dict[str, object]:
        """Return ranked foods for a profile."""
        state_container: AppContainer = request.app.state.container
        items = state_container.diet_plan_service.recommend(
            framework, body.profile, body.preferences, user_id=body.user_id
        )
        return {
            "framework": state_container.registry.get(framework).name,
            "recommendations": [serialize_recommendation(item) for item in items],
        }

    @app.post("/frameworks/{framework}/plans")
    async def plans(
        framework: str, body: PlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a seven-day plan for a profile."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.diet_plan_service.generate_plan(
            framework, body.profile, body.preferences, polish=body.polish
        )
        return serialize_plan_result(result)

    @app.post("/frameworks/{framework}/foods/{food_id}/score")
    async def score_food(
        framework: str, food_id: str, body: ScoreRequest, request: Request
    ) -> dict[str, object]:
        """Score one catalog food; ``scored`` is false if it cannot be scored."""
        state_container: AppContainer = request.app.state.container
        result = state_container.diet_plan_service.score_food(
            framework, body.profile, food_id, body.preferences
        )
        if result is None:
            return {"item_id": food_id, "scored": False}
        return {
            "scored": True,
            **serialize_scored(result.item, result.tier),
            "blocked": result.blocked,
            "warnings": list(result.warnings),
        }

    return app
