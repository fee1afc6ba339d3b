"""
Repository Interfaces (Ports) for the HeavyGym API.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, local storage, external services). Implementations
are provided in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import DraftStorage, WorkoutLogRepository

    class WorkoutLoggingService:
        def __init__(self, workout_log_repo: WorkoutLogRepository):
            self.workout_log_repo = workout_log_repo
"""

# Workout draft persistence
from application.ports.draft_storage import DraftStorage

# Workout logging and the exercise catalog
from application.ports.workout_log_repository import (
    ExerciseCatalogRepository,
    WorkoutLogRepository,
)

# Nutrition logging
from application.ports.nutrition_repository import NutritionRepository

# Body weight log
from application.ports.weight_repository import WeightRepository

# Food lookup (local table and Open Food Facts)
from application.ports.food_repository import (
    FoodProduct,
    FoodRepository,
    FoodDatabaseClient,
)

__all__ = [
    # Draft
    "DraftStorage",
    # Workout logging
    "ExerciseCatalogRepository",
    "WorkoutLogRepository",
    # Nutrition
    "NutritionRepository",
    # Weight
    "WeightRepository",
    # Food
    "FoodProduct",
    "FoodRepository",
    "FoodDatabaseClient",
]
