"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.food_log import router as food_log_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.parse_errors import (
    ExtractionError,
    InvalidInputError,
    MealParseError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(food_log_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/parse-meal")
    async def parse_meal(request: Request) -> JSONResponse:
        """Estimate food items from a free-text meal description."""
        state_container: AppContainer = request.app.state.container
        try:
            body = await request.json()
        except ValueError:
            body = None
        utterance = body.get("input") if isinstance(body, dict) else None
        try:
            items = await state_container.meal_parser_service.parse(utterance)
        except MealParseError as exc:
            if not isinstance(exc, InvalidInputError):
                logger.warning(
                    "Meal parse failed: %s", exc.reason, extra={"detail": exc.detail}
                )
            return JSONResponse(
                status_code=exc.status_code,
                content=_error_payload(state_container, exc),
            )
        except Exception as exc:
            logger.exception("Unexpected meal parse failure")
            content: dict[str, object] = {
                "error": "server_error",
                "message": "Server error.",
            }
            if state_container.settings.environment == "local":
                content["detail"] = f"{type(exc).__name__}: {exc}"
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=content,
            )
        return JSONResponse(content=[item.model_dump() for item in items])

    return app


def _error_payload(
    state_container: AppContainer, exc: MealParseError
) -> dict[str, object]:
    """Return the error body, keeping raw model replies out of production."""
    payload = exc.to_payload()
    environment = state_container.settings.environment
    if isinstance(exc, ExtractionError) and environment != "local":
        payload.pop("detail", None)
    return payload
