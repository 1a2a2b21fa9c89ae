"""File-based persistence backend: one JSON file per key."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote, unquote

log = logging.getLogger(__name__)


class FilePersistenceBackend:
    """Stores data as JSON files in a local directory.

    Keys are percent-encoded into file names, so any key (``/`` included)
    comes back unchanged from ``list_keys``.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._base.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        return self._base / f"{quote(key, safe='')}.json"

    def save(self, key: str, data: str) -> None:
        path = self._key_path(key)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(data, encoding="utf-8")
        tmp.replace(path)
        log.debug("Saved %s to %s", key, path)

    def load(self, key: str) -> str:
        path = self._key_path(key)
        if not path.is_file():
            raise KeyError(f"Not found: {key} (path: {path})")
        return path.read_text(encoding="utf-8")

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = []
        for path in self._base.glob("*.json"):
            key = unquote(path.name[: -len(".json")])
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)
