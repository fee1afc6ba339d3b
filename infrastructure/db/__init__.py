"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository
interfaces defined in application.ports. All of them talk to Supabase through
SupabaseGateway, which turns backend failures into GatewayResult errors.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseGateway,
        SupabaseExerciseCatalogRepository,
        SupabaseWorkoutLogRepository,
        SupabaseNutritionRepository,
        SupabaseFoodRepository,
        SupabaseWeightRepository,
    )

    # Create Supabase client and gateway
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    gateway = SupabaseGateway(client)

    # Instantiate repositories with injected gateway
    catalog_repo = SupabaseExerciseCatalogRepository(gateway)
    workout_log_repo = SupabaseWorkoutLogRepository(gateway)
    nutrition_repo = SupabaseNutritionRepository(gateway)
    food_repo = SupabaseFoodRepository(gateway)
    weight_repo = SupabaseWeightRepository(gateway)
"""

from infrastructure.db.gateway import SupabaseGateway, GatewayResult
from infrastructure.db.workout_log_repository import (
    SupabaseExerciseCatalogRepository,
    SupabaseWorkoutLogRepository,
)
from infrastructure.db.nutrition_repository import SupabaseNutritionRepository
from infrastructure.db.food_repository import SupabaseFoodRepository
from infrastructure.db.weight_repository import SupabaseWeightRepository

__all__ = [
    # Gateway
    "SupabaseGateway",
    "GatewayResult",

    # Workout logging
    "SupabaseExerciseCatalogRepository",
    "SupabaseWorkoutLogRepository",

    # Nutrition
    "SupabaseNutritionRepository",
    "SupabaseFoodRepository",

    # Weight
    "SupabaseWeightRepository",
]
