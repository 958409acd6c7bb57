"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.entries import router as entries_router
from calorie_tracker.api.models import AnalyzeFoodRequest
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.analysis import NoFoodIdentifiedError
from calorie_tracker.services.identity import AuthenticationError
from calorie_tracker.services.vision import (
    InvalidImageError,
    VisionExtractionError,
    decode_image_data_url,
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

    app.include_router(entries_router)

    @app.exception_handler(AuthenticationError)
    async def authentication_error(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"error": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze-food")
    async def analyze_food(body: AnalyzeFoodRequest, request: Request) -> JSONResponse:
        """Identify foods in a photo and resolve their nutrients."""
        state_container: AppContainer = request.app.state.container
        if not body.image:
            return _error(status.HTTP_400_BAD_REQUEST, "No image provided")
        if not isinstance(body.image, str):
            return _error(
                status.HTTP_400_BAD_REQUEST, "Image must be a base64 data URL"
            )
        try:
            image_bytes = decode_image_data_url(
                body.image, state_container.settings.max_image_bytes
            )
        except InvalidImageError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))

        try:
            profiles = await state_container.analysis_service.analyze(image_bytes)
        except NoFoodIdentifiedError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except VisionExtractionError as exc:
            logger.exception("Vision extraction failed")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                f"Failed to analyze food image: {exc}",
            )
        except Exception as exc:
            logger.exception("Food analysis failed")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                f"Failed to analyze food image: {exc or type(exc).__name__}",
            )
        return JSONResponse(
            content={"foods": [profile.to_response() for profile in profiles]}
        )

    return app


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
