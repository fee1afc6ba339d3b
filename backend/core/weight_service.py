"""
Body weight tracking service.

Keeps one weight entry per user and date: logging a weight for a date that
already has one overwrites it instead of adding a second point to the chart.
"""
import calendar
import logging
import math
from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional

from application.exceptions import InvalidWeightError, RecordNotFoundError
from application.ports import WeightRepository

logger = logging.getLogger(__name__)

MAX_WEIGHT_KG = 500


def range_start(time_range: str, today: date) -> date:
    """First day included in a chart range ending today."""
    if time_range == "4w":
        return today - timedelta(days=28)
    if time_range == "6m":
        return _months_before(today, 6)
    if time_range == "1y":
        return _months_before(today, 12)
    raise ValueError(f"Unknown time range: {time_range!r}")


def _months_before(day: date, months: int) -> date:
    # Clamp to the last day of shorter months (31 Aug -> 28/29 Feb)
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def validate_weight(weight_kg: float) -> float:
    """
    Raises:
        InvalidWeightError: Unless 0 < weight_kg <= MAX_WEIGHT_KG
    """
    try:
        value = float(weight_kg)
    except (TypeError, ValueError):
        raise InvalidWeightError(f"Weight is not a number: {weight_kg!r}")
    if not math.isfinite(value) or value <= 0 or value > MAX_WEIGHT_KG:
        raise InvalidWeightError(f"Weight out of range: {weight_kg!r}")
    return value


@dataclass
class WeightHistory:
    """Entries of a chart range, oldest first."""
    time_range: str
    since: str
    entries: List[Dict[str, Any]]

    @property
    def change_kg(self) -> float:
        """Last minus first weight in the range; 0 with fewer than two entries."""
        if len(self.entries) < 2:
            return 0.0
        return round(self.entries[-1]["weight_kg"] - self.entries[0]["weight_kg"], 1)

    def to_dict(self) -> Dict[str, Any]:
        return {**asdict(self), "change_kg": self.change_kg}


class WeightService:
    """
    Logs and reads body weight entries.

    Usage:
        service = WeightService(weight_repo)
        service.log_weight(user_id, 82.4)
        history = service.get_weight_history(user_id, "6m")
    """

    def __init__(
        self,
        weight_repo: WeightRepository,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._repo = weight_repo
        self._today = today

    def get_weight_history(self, user_id: str, time_range: str = "4w") -> WeightHistory:
        since = range_start(time_range, self._today()).isoformat()
        entries = self._repo.list_weights(user_id, since=since)
        return WeightHistory(time_range=time_range, since=since, entries=entries)

    def get_last_weight(self, user_id: str) -> Dict[str, Any]:
        """
        Most recent entry, used to prefill the weight and macro forms.

        Raises:
            RecordNotFoundError: If the user has never logged a weight
        """
        entry = self._repo.get_latest_weight(user_id)
        if entry is None:
            raise RecordNotFoundError(f"No weight logged for user {user_id}")
        return entry

    def log_weight(self, user_id: str, weight_kg: float, day: Optional[date] = None) -> Dict[str, Any]:
        """
        Log a weight for a date (default today), replacing that date's entry.

        Raises:
            InvalidWeightError: If the weight is not plausible
        """
        weight_kg = validate_weight(weight_kg)
        day_str = (day or self._today()).isoformat()

        existing = self._repo.get_weight_by_date(user_id, day_str)
        if existing is not None:
            self._repo.update_weight(user_id, existing["id"], {"weight_kg": weight_kg})
            logger.info(f"Replaced weight entry {existing['id']} for user {user_id} on {day_str}")
            return {**existing, "weight_kg": weight_kg}

        return self._repo.insert_weight(user_id, day_str, weight_kg)

    def update_weight_entry(
        self,
        user_id: str,
        entry_id: str,
        weight_kg: float,
        day: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Change the weight and optionally the date of an entry.

        Moving an entry onto a date that already has one folds it into that
        entry: the other entry takes the new weight and this one is removed.

        Raises:
            InvalidWeightError: If the weight is not plausible
            RecordNotFoundError: If the user has no entry with this ID
        """
        weight_kg = validate_weight(weight_kg)
        entry = self._repo.get_weight(user_id, entry_id)
        if entry is None:
            raise RecordNotFoundError(f"Weight entry '{entry_id}' not found")
        day_str = day.isoformat() if day else entry["date"]

        other = self._repo.get_weight_by_date(user_id, day_str)
        if other is not None and str(other["id"]) != str(entry_id):
            self._repo.update_weight(user_id, other["id"], {"weight_kg": weight_kg})
            self._repo.delete_weight(user_id, entry_id)
            logger.info(f"Merged weight entry {entry_id} into {other['id']} for user {user_id}")
            return {**other, "weight_kg": weight_kg}

        values = {"weight_kg": weight_kg, "date": day_str}
        if not self._repo.update_weight(user_id, entry_id, values):
            raise RecordNotFoundError(f"Weight entry '{entry_id}' not found")
        return {**entry, **values}

    def delete_weight_entry(self, user_id: str, entry_id: str) -> None:
        if not self._repo.delete_weight(user_id, entry_id):
            raise RecordNotFoundError(
                f"Weight entry '{entry_id}' not found",
                user_message="Kunde inte ta bort vikten",
            )
