"""
Draft Store adapters.

Implements DraftStorePort. Each store instance is scoped to one browsing
context (one signed-in user); nothing is shared or synchronized between
instances.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class InMemoryDraftStore:
    """Process-local draft storage, useful for tests and previews."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._entries.get(key)

    def write(self, key: str, payload: str) -> None:
        self._entries[key] = payload

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._entries)


class JsonFileDraftStore:
    """
    One JSON file per draft key under base_path.

    Writes go to a temporary file first and are renamed into place so a
    reader never sees a half-written draft.
    """

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid draft key: {key}")
        return self.base_path / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, payload: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.base_path.glob("*.json"))
