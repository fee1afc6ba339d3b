"""
Workout draft router.

Endpoints for assembling a workout before logging it:
- Adding and removing exercises (snapshotted from the catalog)
- Adding, editing, completing and removing sets
- Submitting the draft as a workout log

Mutations referring to an unknown exercise or set leave the draft unchanged
and still answer with the current draft.
"""
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.deps import (
    get_current_user,
    get_draft_store,
    get_exercise_catalog_repo,
    get_workout_logging_service,
)
from application.ports import ExerciseCatalogRepository
from backend.core.workout_draft import DEFAULT_REST_TIME, DEFAULT_SET_COUNT, WorkoutDraftStore
from backend.core.workout_logging_service import WorkoutLoggingService

router = APIRouter(
    prefix="/draft",
    tags=["Workout draft"],
)


# =============================================================================
# Request Models
# =============================================================================


class AddExerciseRequest(BaseModel):
    """Request model for adding a catalog exercise to the draft."""
    exercise_id: str = Field(..., min_length=1, description="Catalog exercise id")
    set_count: int = Field(DEFAULT_SET_COUNT, ge=0, le=50, description="Empty sets to create")
    rest_time: int = Field(DEFAULT_REST_TIME, ge=0, le=3600, description="Rest between sets (seconds)")


class UpdateSetRequest(BaseModel):
    """Request model for editing a set's weight or reps text."""
    field: Literal["weight", "reps"]
    value: str = Field("", max_length=20)


class SubmitDraftRequest(BaseModel):
    """Request model for logging the draft."""
    name: Optional[str] = Field(None, max_length=200, description="Workout name")


def _draft_response(store: WorkoutDraftStore) -> Dict[str, Any]:
    return {
        **store.to_dict(),
        "exercise_count": store.get_exercise_count(),
    }


# =============================================================================
# Draft Endpoints
# =============================================================================


@router.get("")
def get_draft(store: WorkoutDraftStore = Depends(get_draft_store)) -> Dict[str, Any]:
    """Get the current draft and its exercise count."""
    return _draft_response(store)


@router.delete("")
def clear_draft(store: WorkoutDraftStore = Depends(get_draft_store)) -> Dict[str, Any]:
    """Discard every exercise in the draft."""
    store.clear_draft()
    return _draft_response(store)


@router.post("/exercises")
def add_exercise(
    request: AddExerciseRequest,
    store: WorkoutDraftStore = Depends(get_draft_store),
    catalog: ExerciseCatalogRepository = Depends(get_exercise_catalog_repo),
) -> Dict[str, Any]:
    """
    Add a catalog exercise to the draft.

    An exercise already in the draft is not added twice; ``added`` reports
    whether anything changed.
    """
    exercise = catalog.get_exercise(request.exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail=f"Exercise '{request.exercise_id}' not found")

    added = store.add_exercise(exercise, set_count=request.set_count, rest_time=request.rest_time)
    return {**_draft_response(store), "added": added is not None}


@router.delete("/exercises/{draft_exercise_id}")
def remove_exercise(
    draft_exercise_id: str,
    store: WorkoutDraftStore = Depends(get_draft_store),
) -> Dict[str, Any]:
    store.remove_exercise(draft_exercise_id)
    return _draft_response(store)


@router.post("/exercises/{draft_exercise_id}/sets")
def add_set(
    draft_exercise_id: str,
    store: WorkoutDraftStore = Depends(get_draft_store),
) -> Dict[str, Any]:
    store.add_set(draft_exercise_id)
    return _draft_response(store)


@router.delete("/exercises/{draft_exercise_id}/sets/{set_id}")
def remove_set(
    draft_exercise_id: str,
    set_id: str,
    store: WorkoutDraftStore = Depends(get_draft_store),
) -> Dict[str, Any]:
    store.remove_set(draft_exercise_id, set_id)
    return _draft_response(store)


@router.patch("/exercises/{draft_exercise_id}/sets/{set_id}")
def update_set(
    draft_exercise_id: str,
    set_id: str,
    request: UpdateSetRequest,
    store: WorkoutDraftStore = Depends(get_draft_store),
) -> Dict[str, Any]:
    """Replace the weight or reps text of a set. Values are validated on submit."""
    store.update_set(draft_exercise_id, set_id, request.field, request.value)
    return _draft_response(store)


@router.post("/exercises/{draft_exercise_id}/sets/{set_id}/toggle")
def toggle_set_completion(
    draft_exercise_id: str,
    set_id: str,
    store: WorkoutDraftStore = Depends(get_draft_store),
) -> Dict[str, Any]:
    store.toggle_set_completion(draft_exercise_id, set_id)
    return _draft_response(store)


# =============================================================================
# Submission
# =============================================================================


@router.post("/submit")
def submit_draft(
    request: SubmitDraftRequest,
    user_id: str = Depends(get_current_user),
    store: WorkoutDraftStore = Depends(get_draft_store),
    service: WorkoutLoggingService = Depends(get_workout_logging_service),
) -> Dict[str, Any]:
    """
    Log the draft as a workout and clear it.

    Returns 400 for an empty draft or non-numeric set values; the draft is
    kept in both cases.
    """
    result = service.submit_draft(user_id, store, workout_name=request.name)
    return result.to_dict()
