"""
Workout history router.

Logged workouts, newest first, with per-workout set, rep and weight totals.
Workouts are created through the draft router.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from api.deps import get_current_user, get_workout_logging_service
from backend.core.workout_logging_service import WorkoutLoggingService

router = APIRouter(
    prefix="/workouts",
    tags=["Workout history"],
)


@router.get("")
def list_workouts(
    start_date: Optional[date] = Query(None, description="Earliest workout date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Latest workout date (inclusive)"),
    user_id: str = Depends(get_current_user),
    service: WorkoutLoggingService = Depends(get_workout_logging_service),
) -> List[Dict[str, Any]]:
    """List the user's workouts with their exercises, sets and totals."""
    return service.get_workout_history(user_id, start_date=start_date, end_date=end_date)


@router.get("/{workout_id}")
def get_workout(
    workout_id: str = Path(..., min_length=1, max_length=100),
    user_id: str = Depends(get_current_user),
    service: WorkoutLoggingService = Depends(get_workout_logging_service),
) -> Dict[str, Any]:
    """Get one workout with its exercises, sets and totals."""
    return service.get_workout(user_id, workout_id)


@router.delete("/{workout_id}")
def delete_workout(
    workout_id: str = Path(..., min_length=1, max_length=100),
    user_id: str = Depends(get_current_user),
    service: WorkoutLoggingService = Depends(get_workout_logging_service),
) -> Dict[str, Any]:
    """Delete a workout and its exercise and set logs."""
    service.delete_workout(user_id, workout_id)
    return {"success": True}
