"""
Local key-value storage for workout drafts.

Implements the DraftStorage protocol with a directory of JSON files (one file
per key) and an in-memory dict for tests and ephemeral sessions.
"""
import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileDraftStorage:
    """
    File-backed implementation of DraftStorage.

    Each key maps to ``<directory>/<sanitized key>.json``. Writes go to a temp
    file first and are moved into place with os.replace(), so a reader sees
    either the previous draft or the new one, never a partial write.
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize with a storage directory (created on first write).

        Args:
            directory: Directory that holds the draft files
        """
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """
        Map a key to its file path.

        Keys are sanitized to a safe file name; a short hash of the original
        key keeps distinct keys (e.g. ``a:b`` vs ``a_b``) from colliding.
        """
        safe = _SAFE_KEY.sub("_", key)
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
        return self._directory / f"{safe}-{digest}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)

        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=str(self._directory),
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as tmp_file:
                tmp_file.write(value)
                tmp_path = tmp_file.name

            os.replace(tmp_path, str(path))
        except OSError:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def remove_item(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass


class InMemoryDraftStorage:
    """
    Dict-backed implementation of DraftStorage.

    State is lost when the process exits.
    """

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def reset(self) -> None:
        """Clear all stored drafts."""
        self._items.clear()
