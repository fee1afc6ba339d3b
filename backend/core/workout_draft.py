"""
Workout draft store.

Holds the exercises and sets a user is assembling before logging a workout.
The store is an explicit state container: persistence goes through an
injected DraftStorage adapter, and every mutation writes the full state
back under the store's namespace.

Mutations never raise on unknown ids; they leave the draft untouched. A
persistence failure is logged and the in-memory state stays authoritative.

Persisted format (compatible with the mobile client's local storage):

    {"state": {"exercises": [...]}, "version": 0}
"""
import json
import logging
import secrets
import string
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional

from application.ports import DraftStorage

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "workout-draft-storage"
DEFAULT_SET_COUNT = 1
DEFAULT_REST_TIME = 90
STORAGE_VERSION = 0

SET_FIELDS = ("weight", "reps")

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_draft_id(prefix: str) -> str:
    """Return ``<prefix>-<epoch ms>-<7 random chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


@dataclass
class DraftSet:
    """One set of a draft exercise. Weight and reps hold raw user input."""
    id: str
    weight: str = ""
    reps: str = ""
    completed: bool = False


@dataclass
class DraftExercise:
    """An exercise in the draft with a snapshot of its catalog row."""
    id: str
    exercise_id: str
    exercise: Dict[str, Any]
    sets: List[DraftSet] = field(default_factory=list)
    rest_time: int = DEFAULT_REST_TIME

    def find_set(self, set_id: str) -> Optional[DraftSet]:
        for draft_set in self.sets:
            if draft_set.id == set_id:
                return draft_set
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DraftExercise":
        return cls(
            id=data["id"],
            exercise_id=str(data["exercise_id"]),
            exercise=data.get("exercise") or {},
            sets=[
                DraftSet(
                    id=s["id"],
                    weight=str(s.get("weight", "")),
                    reps=str(s.get("reps", "")),
                    completed=bool(s.get("completed", False)),
                )
                for s in data.get("sets", [])
            ],
            rest_time=int(data.get("rest_time", DEFAULT_REST_TIME)),
        )


class WorkoutDraftStore:
    """
    State container for a single workout draft.

    Usage:
        store = WorkoutDraftStore(JsonFileDraftStorage("./data/drafts"))
        store.add_exercise({"id": "ex-1", "name": "Bänkpress"}, set_count=3)
        store.get_exercise_count()  # 1
    """

    def __init__(
        self,
        storage: DraftStorage,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        id_factory: Callable[[str], str] = generate_draft_id,
    ):
        """
        Initialize the store and hydrate it from storage.

        Args:
            storage: Persistence adapter (injected)
            namespace: Storage key the draft lives under
            id_factory: Produces ids from a prefix ("draft-exercise"/"draft-set")
        """
        self._storage = storage
        self._namespace = namespace
        self._new_id = id_factory
        self._exercises: List[DraftExercise] = self._load()

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def exercises(self) -> List[DraftExercise]:
        """Draft exercises in insertion order."""
        return list(self._exercises)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_exercise(self, draft_exercise_id: str) -> Optional[DraftExercise]:
        for exercise in self._exercises:
            if exercise.id == draft_exercise_id:
                return exercise
        return None

    def get_exercise_count(self) -> int:
        return len(self._exercises)

    def to_dict(self) -> Dict[str, Any]:
        return {"exercises": [asdict(e) for e in self._exercises]}

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_exercise(
        self,
        exercise: Dict[str, Any],
        set_count: int = DEFAULT_SET_COUNT,
        rest_time: int = DEFAULT_REST_TIME,
    ) -> Optional[DraftExercise]:
        """
        Add an exercise with ``set_count`` empty sets.

        Adding an exercise whose id is already in the draft does nothing.

        Args:
            exercise: Catalog row; must contain ``id``
            set_count: Number of empty sets to create
            rest_time: Rest between sets in seconds

        Returns:
            The new DraftExercise, or None if the exercise was already present
        """
        if exercise.get("id") is None:
            raise ValueError("exercise must have an 'id'")
        exercise_id = str(exercise["id"])

        if any(e.exercise_id == exercise_id for e in self._exercises):
            return None

        draft_exercise = DraftExercise(
            id=self._new_id("draft-exercise"),
            exercise_id=exercise_id,
            exercise=dict(exercise),
            sets=[DraftSet(id=self._new_id("draft-set")) for _ in range(max(0, set_count))],
            rest_time=rest_time,
        )
        self._exercises.append(draft_exercise)
        self._persist()
        return draft_exercise

    def remove_exercise(self, draft_exercise_id: str) -> None:
        remaining = [e for e in self._exercises if e.id != draft_exercise_id]
        if len(remaining) == len(self._exercises):
            return
        self._exercises = remaining
        self._persist()

    def update_set(self, draft_exercise_id: str, set_id: str, field_name: str, value: str) -> None:
        """
        Set the weight or reps text of one set.

        Raises:
            ValueError: If field_name is not "weight" or "reps"
        """
        if field_name not in SET_FIELDS:
            raise ValueError(f"field must be one of {SET_FIELDS}, got '{field_name}'")

        draft_set = self._find_set(draft_exercise_id, set_id)
        if draft_set is None:
            return
        setattr(draft_set, field_name, str(value))
        self._persist()

    def toggle_set_completion(self, draft_exercise_id: str, set_id: str) -> None:
        draft_set = self._find_set(draft_exercise_id, set_id)
        if draft_set is None:
            return
        draft_set.completed = not draft_set.completed
        self._persist()

    def add_set(self, draft_exercise_id: str) -> Optional[DraftSet]:
        exercise = self.get_exercise(draft_exercise_id)
        if exercise is None:
            return None
        draft_set = DraftSet(id=self._new_id("draft-set"))
        exercise.sets.append(draft_set)
        self._persist()
        return draft_set

    def remove_set(self, draft_exercise_id: str, set_id: str) -> None:
        exercise = self.get_exercise(draft_exercise_id)
        if exercise is None or exercise.find_set(set_id) is None:
            return
        exercise.sets = [s for s in exercise.sets if s.id != set_id]
        self._persist()

    def clear_draft(self) -> None:
        self._exercises = []
        self._persist()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _find_set(self, draft_exercise_id: str, set_id: str) -> Optional[DraftSet]:
        exercise = self.get_exercise(draft_exercise_id)
        if exercise is None:
            return None
        return exercise.find_set(set_id)

    def _load(self) -> List[DraftExercise]:
        try:
            raw = self._storage.get_item(self._namespace)
        except Exception as e:
            logger.warning(f"Could not read workout draft '{self._namespace}': {e}")
            return []

        if not raw:
            return []

        try:
            payload = json.loads(raw)
            return [
                DraftExercise.from_dict(item)
                for item in payload.get("state", {}).get("exercises", [])
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Discarding unreadable workout draft '{self._namespace}': {e}")
            return []

    def _persist(self) -> None:
        payload = json.dumps(
            {"state": self.to_dict(), "version": STORAGE_VERSION},
            ensure_ascii=False,
        )
        try:
            self._storage.set_item(self._namespace, payload)
        except Exception as e:
            logger.warning(f"Could not persist workout draft '{self._namespace}': {e}")
