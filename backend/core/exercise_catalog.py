"""
Exercise catalog search.

The catalog (``ovningar``) is small and read in full; search narrows it in
process so the draft picker and the API match the same way.
"""
from typing import Any, Dict, List, Optional

from application.ports import ExerciseCatalogRepository


def filter_exercises(exercises: List[Dict[str, Any]], query: Optional[str]) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on exercise name or category."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(exercises)
    return [
        ex for ex in exercises
        if needle in (ex.get("name") or "").lower()
        or needle in (ex.get("category") or "").lower()
    ]


def search_exercises(repo: ExerciseCatalogRepository, query: Optional[str] = None) -> List[Dict[str, Any]]:
    """List catalog exercises ordered by name, filtered by ``query``."""
    return filter_exercises(repo.list_exercises(), query)
