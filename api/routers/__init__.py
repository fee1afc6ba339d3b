"""
Router package for the HeavyGym API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- exercises: Exercise catalog
- draft: Workout draft editing and submission
- workouts: Logged workout history
- nutrition: Macro goals, meal logging and food lookup
- weight: Body weight log
- food: Public Open Food Facts proxy endpoints
"""

from api.routers.health import router as health_router
from api.routers.exercises import router as exercises_router
from api.routers.draft import router as draft_router
from api.routers.workouts import router as workouts_router
from api.routers.nutrition import router as nutrition_router
from api.routers.weight import router as weight_router
from api.routers.food import router as food_router

__all__ = [
    "health_router",
    "exercises_router",
    "draft_router",
    "workouts_router",
    "nutrition_router",
    "weight_router",
    "food_router",
]
