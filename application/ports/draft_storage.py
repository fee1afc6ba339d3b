"""
Draft Storage Interface (Port).

This module defines the key-value interface the workout draft store persists
through. It mirrors device local storage: string keys, string (JSON) values.
"""
from typing import Protocol, Optional


class DraftStorage(Protocol):
    """
    Abstract interface for persisting serialized workout drafts.

    Implementations only move strings around; serialization is owned by
    the draft store itself.
    """

    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key (the draft namespace)

        Returns:
            The stored string, or None if nothing is stored
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key (the draft namespace)
            value: Serialized draft state
        """
        ...

    def remove_item(self, key: str) -> None:
        """
        Delete the value stored under a key. No-op if absent.

        Args:
            key: Storage key (the draft namespace)
        """
        ...
