"""
Infrastructure Layer for the HeavyGym API.

This package contains concrete implementations of the interfaces in
application.ports:
- db/: Supabase gateway and repositories
- storage/: Local key-value storage for workout drafts
- food/: Open Food Facts HTTP client
"""

# Re-export adapters for convenient access
from infrastructure.db import (
    SupabaseGateway,
    GatewayResult,
    SupabaseExerciseCatalogRepository,
    SupabaseWorkoutLogRepository,
    SupabaseNutritionRepository,
    SupabaseFoodRepository,
    SupabaseWeightRepository,
)
from infrastructure.storage import JsonFileDraftStorage, InMemoryDraftStorage
from infrastructure.food import OpenFoodFactsClient

__all__ = [
    "SupabaseGateway",
    "GatewayResult",
    "SupabaseExerciseCatalogRepository",
    "SupabaseWorkoutLogRepository",
    "SupabaseNutritionRepository",
    "SupabaseFoodRepository",
    "SupabaseWeightRepository",
    "JsonFileDraftStorage",
    "InMemoryDraftStorage",
    "OpenFoodFactsClient",
]
