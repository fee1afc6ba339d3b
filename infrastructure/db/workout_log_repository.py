"""
Supabase Workout Log and Exercise Catalog Repository Implementations.

Implements the WorkoutLogRepository and ExerciseCatalogRepository protocols
on top of the SupabaseGateway. Tables:

- ovningar: exercise catalog
- workout_logs -> exercise_logs -> set_logs: logged workouts
"""
from typing import Optional, List, Dict, Any
import logging

from infrastructure.db.gateway import SupabaseGateway

logger = logging.getLogger(__name__)

EXERCISE_CATALOG_TABLE = "ovningar"

# Workout with its exercise logs, their catalog exercise and their sets
WORKOUT_HISTORY_COLUMNS = "*, exercise_logs (*, exercise:ovningar (*), set_logs (*))"


class SupabaseExerciseCatalogRepository:
    """
    Supabase implementation of ExerciseCatalogRepository.
    """

    def __init__(self, gateway: SupabaseGateway):
        """
        Initialize with the data gateway.

        Args:
            gateway: SupabaseGateway instance (injected)
        """
        self._gateway = gateway

    def list_exercises(self) -> List[Dict[str, Any]]:
        """Get all catalog exercises ordered by name."""
        return self._gateway.select(EXERCISE_CATALOG_TABLE, order="name").unwrap() or []

    def get_exercise(self, exercise_id: str) -> Optional[Dict[str, Any]]:
        """Get a single catalog exercise."""
        return self._gateway.select(
            EXERCISE_CATALOG_TABLE,
            eq={"id": exercise_id},
            maybe_single=True,
        ).unwrap()


class SupabaseWorkoutLogRepository:
    """
    Supabase implementation of WorkoutLogRepository.

    Rows are inserted one level at a time because each child row needs the
    generated id of its parent.
    """

    def __init__(self, gateway: SupabaseGateway):
        """
        Initialize with the data gateway.

        Args:
            gateway: SupabaseGateway instance (injected)
        """
        self._gateway = gateway

    def create_workout_log(
        self,
        user_id: str,
        *,
        name: str,
        log_date: str,
    ) -> Dict[str, Any]:
        """Insert a workout log row."""
        row = self._gateway.insert(
            "workout_logs",
            {"user_id": user_id, "date": log_date, "name": name},
            single=True,
        ).unwrap()
        logger.info(f"Created workout log for user {user_id} on {log_date}")
        return row

    def create_exercise_log(
        self,
        workout_id: str,
        *,
        exercise_id: str,
        rest_time: int,
    ) -> Dict[str, Any]:
        """Insert an exercise log row under a workout."""
        return self._gateway.insert(
            "exercise_logs",
            {"workout_id": workout_id, "exercise_id": exercise_id, "rest_time": rest_time},
            single=True,
        ).unwrap()

    def create_set_logs(self, set_logs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Batch insert set log rows."""
        if not set_logs:
            return []
        return self._gateway.insert("set_logs", set_logs).unwrap() or []

    def list_workout_logs(
        self,
        user_id: str,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Get the user's workouts with nested logs, newest first."""
        return self._gateway.select(
            "workout_logs",
            WORKOUT_HISTORY_COLUMNS,
            eq={"user_id": user_id},
            gte={"date": start_date} if start_date else None,
            lte={"date": end_date} if end_date else None,
            order=["date", "created_at"],
            desc=True,
        ).unwrap() or []

    def get_workout_log(self, user_id: str, workout_id: str) -> Optional[Dict[str, Any]]:
        """Get one of the user's workouts with nested logs."""
        return self._gateway.select(
            "workout_logs",
            WORKOUT_HISTORY_COLUMNS,
            eq={"id": workout_id, "user_id": user_id},
            maybe_single=True,
        ).unwrap()

    def delete_workout_log(self, user_id: str, workout_id: str) -> bool:
        """Delete one of the user's workouts."""
        rows = self._gateway.delete(
            "workout_logs", eq={"id": workout_id, "user_id": user_id}
        ).unwrap()
        if rows:
            logger.info(f"Deleted workout log {workout_id} for user {user_id}")
        return bool(rows)
