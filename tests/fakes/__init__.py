"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of the port interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeExerciseCatalogRepository, create_catalog_repo

    repo = create_catalog_repo()
    repo.get_exercise("ex-bench")
"""
from typing import Optional

from application.ports import FoodProduct
from infrastructure.storage import InMemoryDraftStorage

from tests.fakes.workout_log_repository import (
    FakeExerciseCatalogRepository,
    FakeWorkoutLogRepository,
)
from tests.fakes.nutrition_repository import FakeNutritionRepository
from tests.fakes.food_repository import FakeFoodRepository, FakeFoodDatabaseClient
from tests.fakes.weight_repository import FakeWeightRepository


# =============================================================================
# Sample Data
# =============================================================================

BENCH_PRESS = {"id": "ex-bench", "name": "Bänkpress", "category": "Bröst"}
SQUAT = {"id": "ex-squat", "name": "Knäböj", "category": "Ben"}
DEADLIFT = {"id": "ex-deadlift", "name": "Marklyft", "category": "Rygg"}

OATS = FoodProduct(
    name="Havregryn",
    brand="Kungsörnen",
    calories=370,
    protein=13,
    fat=7,
    carbs=59,
    sugar=1,
    image_url="",
    off_id="7310130008217",
)


# =============================================================================
# Factory Functions
# =============================================================================


def create_catalog_repo(*, with_samples: bool = True) -> FakeExerciseCatalogRepository:
    """
    Create a FakeExerciseCatalogRepository, optionally seeded with three lifts.
    """
    repo = FakeExerciseCatalogRepository()
    if with_samples:
        repo.seed([BENCH_PRESS, SQUAT, DEADLIFT])
    return repo


def create_draft_storage(initial: Optional[dict] = None) -> InMemoryDraftStorage:
    return InMemoryDraftStorage(initial)


__all__ = [
    # Fakes
    "FakeExerciseCatalogRepository",
    "FakeWorkoutLogRepository",
    "FakeNutritionRepository",
    "FakeFoodRepository",
    "FakeFoodDatabaseClient",
    "FakeWeightRepository",
    # Sample data
    "BENCH_PRESS",
    "SQUAT",
    "DEADLIFT",
    "OATS",
    # Factories
    "create_catalog_repo",
    "create_draft_storage",
]
