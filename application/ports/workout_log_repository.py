"""
Workout Log and Exercise Catalog Repository Interfaces (Ports).

This module defines the abstract interfaces used when turning a workout
draft into persisted workout, exercise and set logs, for reading them back
as workout history, and for reading the exercise catalog drafts are built from.
"""
from typing import Protocol, Optional, List, Dict, Any


class ExerciseCatalogRepository(Protocol):
    """
    Abstract interface for reading the exercise catalog.
    """

    def list_exercises(self) -> List[Dict[str, Any]]:
        """
        Get all catalog exercises ordered by name.

        Returns:
            List of exercise dictionaries (id, name, category, ...)
        """
        ...

    def get_exercise(self, exercise_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single catalog exercise.

        Args:
            exercise_id: Catalog exercise ID

        Returns:
            Exercise dictionary or None if not found
        """
        ...


class WorkoutLogRepository(Protocol):
    """
    Abstract interface for persisting logged workouts.

    The three tables form a hierarchy: workout_logs -> exercise_logs -> set_logs.
    """

    def create_workout_log(
        self,
        user_id: str,
        *,
        name: str,
        log_date: str,
    ) -> Dict[str, Any]:
        """
        Insert a workout log row.

        Args:
            user_id: Owner of the workout
            name: Workout name shown in history
            log_date: ISO date (YYYY-MM-DD)

        Returns:
            The inserted row, including its generated ``id``
        """
        ...

    def create_exercise_log(
        self,
        workout_id: str,
        *,
        exercise_id: str,
        rest_time: int,
    ) -> Dict[str, Any]:
        """
        Insert an exercise log row under a workout.

        Args:
            workout_id: Parent workout log ID
            exercise_id: Catalog exercise ID
            rest_time: Rest between sets in seconds

        Returns:
            The inserted row, including its generated ``id``
        """
        ...

    def create_set_logs(self, set_logs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Batch insert set log rows.

        Args:
            set_logs: Rows with exercise_log_id, set_number, weight, reps, completed

        Returns:
            The inserted rows
        """
        ...

    def list_workout_logs(
        self,
        user_id: str,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get the user's workouts, newest first, with nested logs.

        Args:
            user_id: Owner of the workouts
            start_date: Inclusive lower bound on the workout date
            end_date: Inclusive upper bound on the workout date

        Returns:
            Workout rows, each with ``exercise_logs`` holding the catalog
            ``exercise`` and its ``set_logs``
        """
        ...

    def get_workout_log(self, user_id: str, workout_id: str) -> Optional[Dict[str, Any]]:
        """Get one of the user's workouts with nested logs, or None."""
        ...

    def delete_workout_log(self, user_id: str, workout_id: str) -> bool:
        """
        Delete one of the user's workouts (child logs go by cascade).

        Returns:
            True if a row was deleted
        """
        ...
