"""
Local storage adapters.

Usage:
    from infrastructure.storage import JsonFileDraftStorage

    storage = JsonFileDraftStorage("./data/drafts")
"""

from infrastructure.storage.draft_storage import (
    JsonFileDraftStorage,
    InMemoryDraftStorage,
)

__all__ = [
    "JsonFileDraftStorage",
    "InMemoryDraftStorage",
]
