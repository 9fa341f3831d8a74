from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

logger = logging.getLogger(__name__)

SITE_DATA_KEY = "site_data"
API_SETTINGS_KEY = "api_settings"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalCache:
    """
    Client-side key/value storage: one JSON file per key under `root`.

    - Missing or corrupt entries read as None.
    - Each entry is written atomically and independently of the others.
    """

    def __init__(self, root: Path):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"invalid cache key: {key!r}")
        return self._root / f"{key}.json"

    def get(self, key: str) -> Any | None:
        return read_json(self._path(key))

    def set(self, key: str, value: Any) -> None:
        atomic_write_json(self._path(key), value, sort_keys=False)

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            logger.debug("CACHE REMOVE: %s not present", key)
