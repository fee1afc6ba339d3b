"""
API package for the HeavyGym API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_gateway,
    get_exercise_catalog_repo,
    get_workout_log_repo,
    get_nutrition_repo,
    get_food_repo,
    get_weight_repo,
    get_food_client,
    get_draft_storage,
    get_draft_store,
    get_workout_logging_service,
    get_nutrition_service,
    get_weight_service,
    get_food_search_service,
    get_current_user,
)

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
    "get_food_search_service",
    # Authentication
    "get_current_user",
]
