"""
FastAPI Dependency Providers for the HeavyGym API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fake implementations.

Architecture:
- Settings, the Supabase client and the draft storage are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_nutrition_service, get_current_user
    from backend.core.nutrition_service import NutritionService

    @router.get("/nutrition/daily")
    def daily(
        user_id: str = Depends(get_current_user),
        service: NutritionService = Depends(get_nutrition_service),
    ):
        return service.get_daily_summary(user_id).to_dict()

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_nutrition_repo] = lambda: FakeNutritionRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import (
    DraftStorage,
    ExerciseCatalogRepository,
    FoodDatabaseClient,
    FoodRepository,
    NutritionRepository,
    WeightRepository,
    WorkoutLogRepository,
)

# Concrete implementations
from infrastructure import (
    JsonFileDraftStorage,
    OpenFoodFactsClient,
    SupabaseExerciseCatalogRepository,
    SupabaseFoodRepository,
    SupabaseGateway,
    SupabaseNutritionRepository,
    SupabaseWeightRepository,
    SupabaseWorkoutLogRepository,
)

# Services
from backend.core.food_search_service import FoodSearchService
from backend.core.nutrition_service import NutritionService
from backend.core.weight_service import WeightService
from backend.core.workout_draft import WorkoutDraftStore
from backend.core.workout_logging_service import WorkoutLoggingService

from backend.settings import Settings, get_settings as _get_settings

# Auth from existing module (wrap to maintain single source of truth)
from backend.auth import get_current_user as _get_current_user


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


def get_gateway(
    client: Client = Depends(get_supabase_client_required),
) -> SupabaseGateway:
    """Wrap the Supabase client in the {data, error} gateway."""
    return SupabaseGateway(client)


# =============================================================================
# Repository Providers
# =============================================================================


def get_exercise_catalog_repo(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> ExerciseCatalogRepository:
    """Get ExerciseCatalogRepository implementation."""
    return SupabaseExerciseCatalogRepository(gateway)


def get_workout_log_repo(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> WorkoutLogRepository:
    """Get WorkoutLogRepository implementation."""
    return SupabaseWorkoutLogRepository(gateway)


def get_nutrition_repo(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> NutritionRepository:
    """Get NutritionRepository implementation."""
    return SupabaseNutritionRepository(gateway)


def get_weight_repo(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> WeightRepository:
    """Get WeightRepository implementation (weight_tracking table)."""
    return SupabaseWeightRepository(gateway)


def get_food_repo(
    gateway: SupabaseGateway = Depends(get_gateway),
) -> FoodRepository:
    """Get FoodRepository implementation (local food_database table)."""
    return SupabaseFoodRepository(gateway)


def get_food_client(
    settings: Settings = Depends(get_settings),
) -> FoodDatabaseClient:
    """Get the Open Food Facts client configured from settings."""
    return OpenFoodFactsClient(
        base_url=settings.open_food_facts_url,
        timeout=settings.open_food_facts_timeout,
        user_agent=settings.open_food_facts_user_agent,
    )


# =============================================================================
# Draft Providers
# =============================================================================


@lru_cache
def get_draft_storage() -> DraftStorage:
    """
    Get the draft storage adapter (cached).

    Drafts are kept as JSON files under settings.draft_storage_dir.
    """
    return JsonFileDraftStorage(_get_settings().draft_storage_dir)


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(authorization=authorization, x_api_key=x_api_key)


def get_draft_store(
    user_id: str = Depends(get_current_user),
    storage: DraftStorage = Depends(get_draft_storage),
    settings: Settings = Depends(get_settings),
) -> WorkoutDraftStore:
    """
    Get the current user's workout draft.

    Each user's draft lives under ``<namespace>:<user_id>``.
    """
    return WorkoutDraftStore(
        storage,
        namespace=f"{settings.draft_storage_namespace}:{user_id}",
    )


# =============================================================================
# Service Providers
# =============================================================================


def get_workout_logging_service(
    workout_log_repo: WorkoutLogRepository = Depends(get_workout_log_repo),
) -> WorkoutLoggingService:
    return WorkoutLoggingService(workout_log_repo)


def get_weight_service(
    weight_repo: WeightRepository = Depends(get_weight_repo),
) -> WeightService:
    return WeightService(weight_repo)


def get_nutrition_service(
    nutrition_repo: NutritionRepository = Depends(get_nutrition_repo),
    settings: Settings = Depends(get_settings),
) -> NutritionService:
    return NutritionService(
        nutrition_repo,
        webhook_url=settings.macro_goals_webhook_url,
    )


@lru_cache
def get_food_search_cache() -> dict:
    """Process-wide cache for product name searches."""
    return {}


def get_food_search_service(
    food_repo: FoodRepository = Depends(get_food_repo),
    food_client: FoodDatabaseClient = Depends(get_food_client),
    settings: Settings = Depends(get_settings),
) -> FoodSearchService:
    return FoodSearchService(
        food_repo,
        food_client,
        cache_ttl_seconds=settings.food_search_cache_ttl_seconds,
        max_attempts=settings.food_search_max_attempts,
        cache=get_food_search_cache(),
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    "get_gateway",
    # Repositories
    "get_exercise_catalog_repo",
    "get_workout_log_repo",
    "get_nutrition_repo",
    "get_food_repo",
    "get_weight_repo",
    "get_food_client",
    # Drafts
    "get_draft_storage",
    "get_draft_store",
    # Services
    "get_workout_logging_service",
    "get_nutrition_service",
    "get_weight_service",
    "get_food_search_cache",
    "get_food_search_service",
    # Authentication
    "get_current_user",
]
