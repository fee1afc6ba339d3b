"""
Exercises router for the exercise catalog.

Lists the catalog the workout draft picks exercises from, with an optional
name/category search.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Path
from pydantic import BaseModel

from api.deps import get_current_user, get_exercise_catalog_repo
from application.ports import ExerciseCatalogRepository
from backend.core.exercise_catalog import search_exercises

router = APIRouter(
    prefix="/exercises",
    tags=["Exercises"],
)


class ExerciseListResponse(BaseModel):
    """Response model for list of exercises."""
    exercises: List[Dict[str, Any]]
    count: int


@router.get("", response_model=ExerciseListResponse)
def list_exercises(
    search: Optional[str] = Query(None, description="Filter by name or category"),
    user_id: str = Depends(get_current_user),
    repo: ExerciseCatalogRepository = Depends(get_exercise_catalog_repo),
) -> ExerciseListResponse:
    """
    List catalog exercises, ordered by name.

    ``search`` matches case-insensitively against name and category.
    """
    exercises = search_exercises(repo, search)
    return ExerciseListResponse(exercises=exercises, count=len(exercises))


@router.get("/{exercise_id}")
def get_exercise(
    exercise_id: str = Path(..., min_length=1, max_length=100),
    user_id: str = Depends(get_current_user),
    repo: ExerciseCatalogRepository = Depends(get_exercise_catalog_repo),
) -> Dict[str, Any]:
    """Get a catalog exercise by ID."""
    exercise = repo.get_exercise(exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail=f"Exercise '{exercise_id}' not found")
    return exercise
