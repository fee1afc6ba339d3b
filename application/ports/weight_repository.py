"""
Weight Repository Interface (Port).

Body weight log: at most one entry per user and date in ``weight_tracking``.
"""
from typing import Protocol, Optional, List, Dict, Any


class WeightRepository(Protocol):
    """
    Abstract interface for body weight entries.

    Every read and write is scoped by owner: another user's entry behaves as
    if it did not exist.
    """

    def list_weights(self, user_id: str, *, since: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Get the user's entries, oldest first.

        Args:
            user_id: Owner of the entries
            since: Inclusive ISO date lower bound

        Returns:
            Rows with id, user_id, date and weight_kg
        """
        ...

    def get_latest_weight(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the entry with the most recent date, or None."""
        ...

    def get_weight(self, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
        """Get one of the user's entries by ID, or None."""
        ...

    def get_weight_by_date(self, user_id: str, day: str) -> Optional[Dict[str, Any]]:
        """Get the user's entry for a date, or None."""
        ...

    def insert_weight(self, user_id: str, day: str, weight_kg: float) -> Dict[str, Any]:
        """Insert an entry and return it."""
        ...

    def update_weight(self, user_id: str, entry_id: str, values: Dict[str, Any]) -> bool:
        """
        Update weight_kg and/or date of one of the user's entries.

        Returns:
            True if a row was updated
        """
        ...

    def delete_weight(self, user_id: str, entry_id: str) -> bool:
        """Delete one of the user's entries. Returns True if a row was deleted."""
        ...
