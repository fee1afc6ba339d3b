"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from application.exceptions import (
    EmptyDraftError,
    FoodDatabaseError,
    FoodDatabaseUnavailable,
    GatewayError,
    HeavyGymError,
    InvalidMacroInputError,
    InvalidSetValueError,
    InvalidWeightError,
    ProductNotFoundError,
    RecordNotFoundError,
)
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Most specific first; the first matching class decides the status.
ERROR_STATUS_CODES = (
    (EmptyDraftError, 400),
    (InvalidSetValueError, 400),
    (InvalidMacroInputError, 400),
    (InvalidWeightError, 400),
    (ProductNotFoundError, 404),
    (RecordNotFoundError, 404),
    (FoodDatabaseUnavailable, 504),
    (FoodDatabaseError, 502),
    (GatewayError, 502),
)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    app = FastAPI(
        title="HeavyGym API",
        description="Workout logging, macro goals and nutrition tracking API",
        version="1.0.0",
    )

    _configure_cors(app, settings)

    _register_exception_handlers(app)

    _include_routers(app)

    logger.info(f"HeavyGym API created (environment={settings.environment})")

    return app


def _configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.log_level)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for heavygym-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:8081",  # Expo dev server
        "http://localhost:19006",  # Expo web
    ]
    trusted_origins.extend(settings.cors_allowed_origins_list)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_status_code(exc: HeavyGymError) -> int:
    for error_cls, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return status_code
    return 500


async def heavygym_error_handler(request: Request, exc: HeavyGymError) -> JSONResponse:
    """Render domain errors as {error, detail, retryable}."""
    status_code = error_status_code(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.user_message,
            "detail": str(exc),
            "retryable": exc.retryable,
        },
    )


def _register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HeavyGymError, heavygym_error_handler)


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        health_router,
        exercises_router,
        draft_router,
        workouts_router,
        nutrition_router,
        weight_router,
        food_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Domain routers (with prefixes defined in each router)
    app.include_router(exercises_router)
    app.include_router(draft_router)
    app.include_router(workouts_router)
    app.include_router(nutrition_router)
    app.include_router(weight_router)

    # Public food proxy (no authentication)
    app.include_router(food_router)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
