"""
Workout logging service.

Turns a workout draft into persisted workout, exercise and set logs and
clears the draft once everything has been written. Also reads the logged
workouts back as history with per-workout totals.
"""
import logging
import math
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from application.exceptions import EmptyDraftError, InvalidSetValueError, RecordNotFoundError
from application.ports import WorkoutLogRepository
from backend.core.macro_calculator import round_half_up
from backend.core.workout_draft import WorkoutDraftStore

logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_NAME = "Mitt träningspass"


@dataclass
class WorkoutLogResult:
    """Summary of a submitted workout."""
    workout_id: str
    name: str
    date: str
    exercise_count: int
    set_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def with_workout_totals(workout: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add total_sets, total_reps and total_weight_lifted to a nested workout row.

    Every logged set counts, completed or not. Weight lifted is the sum of
    weight times reps, rounded to whole kg.
    """
    sets = [
        s
        for exercise_log in workout.get("exercise_logs") or []
        for s in exercise_log.get("set_logs") or []
    ]
    return {
        **workout,
        "total_sets": len(sets),
        "total_reps": sum(s.get("reps") or 0 for s in sets),
        "total_weight_lifted": round_half_up(
            sum((s.get("weight") or 0) * (s.get("reps") or 0) for s in sets)
        ),
    }


def _parse_number(text: str, field_name: str) -> float:
    """Parse user-typed numeric text. Blank counts as 0; comma decimals are accepted."""
    text = (text or "").strip().replace(",", ".")
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        raise InvalidSetValueError(f"{field_name} '{text}' is not a number") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidSetValueError(f"{field_name} '{text}' must be a non-negative number")
    return value


def parse_weight(text: str) -> float:
    return _parse_number(text, "weight")


def parse_reps(text: str) -> int:
    # Fractional reps are truncated
    return int(_parse_number(text, "reps"))


class WorkoutLoggingService:
    """
    Persists workout drafts and reads back the user's workout history.

    Usage:
        service = WorkoutLoggingService(workout_log_repo)
        result = service.submit_draft(user_id, store, workout_name="Ben")
        history = service.get_workout_history(user_id, start_date=date(2026, 10, 1))
    """

    def __init__(
        self,
        workout_log_repo: WorkoutLogRepository,
        *,
        today: Callable[[], date] = date.today,
    ):
        """
        Args:
            workout_log_repo: Repository for workout/exercise/set logs (injected)
            today: Clock used for the log date
        """
        self._repo = workout_log_repo
        self._today = today

    def submit_draft(
        self,
        user_id: str,
        store: WorkoutDraftStore,
        workout_name: Optional[str] = None,
    ) -> WorkoutLogResult:
        """
        Write the draft as a workout log and clear it.

        All weight/reps text is parsed before anything is written, so a
        typo does not leave a half-written workout behind. The draft is only
        cleared after every insert succeeded.

        Raises:
            EmptyDraftError: If the draft has no exercises
            InvalidSetValueError: If a weight or reps value is not a number
            GatewayError: If the database rejects an insert
        """
        exercises = store.exercises
        if not exercises:
            raise EmptyDraftError("Cannot submit an empty workout draft")

        parsed_sets = {
            exercise.id: [
                (parse_weight(s.weight), parse_reps(s.reps), s.completed)
                for s in exercise.sets
            ]
            for exercise in exercises
        }

        name = (workout_name or "").strip() or DEFAULT_WORKOUT_NAME
        log_date = self._today().isoformat()

        workout_log = self._repo.create_workout_log(user_id, name=name, log_date=log_date)
        workout_id = workout_log["id"]

        set_logs: List[Dict[str, Any]] = []
        for exercise in exercises:
            exercise_log = self._repo.create_exercise_log(
                workout_id,
                exercise_id=exercise.exercise_id,
                rest_time=exercise.rest_time,
            )
            for set_number, (weight, reps, completed) in enumerate(parsed_sets[exercise.id], start=1):
                set_logs.append({
                    "exercise_log_id": exercise_log["id"],
                    "set_number": set_number,
                    "weight": weight,
                    "reps": reps,
                    "completed": completed,
                })

        if set_logs:
            self._repo.create_set_logs(set_logs)

        store.clear_draft()

        logger.info(
            f"Logged workout {workout_id} for user {user_id}: "
            f"{len(exercises)} exercises, {len(set_logs)} sets"
        )

        return WorkoutLogResult(
            workout_id=str(workout_id),
            name=name,
            date=log_date,
            exercise_count=len(exercises),
            set_count=len(set_logs),
        )

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def get_workout_history(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """The user's workouts, newest first, optionally within a date range."""
        workouts = self._repo.list_workout_logs(
            user_id,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
        )
        return [with_workout_totals(w) for w in workouts]

    def get_workout(self, user_id: str, workout_id: str) -> Dict[str, Any]:
        """
        Raises:
            RecordNotFoundError: If the user has no workout with this ID
        """
        workout = self._repo.get_workout_log(user_id, workout_id)
        if workout is None:
            raise RecordNotFoundError(f"Workout '{workout_id}' not found")
        return with_workout_totals(workout)

    def delete_workout(self, user_id: str, workout_id: str) -> None:
        if not self._repo.delete_workout_log(user_id, workout_id):
            raise RecordNotFoundError(
                f"Workout '{workout_id}' not found",
                user_message="Kunde inte radera träningspasset",
            )
