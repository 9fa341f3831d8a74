from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from json_store import atomic_write_bytes, read_bytes


class SiteDocumentStore(Protocol):
    """
    A single site document persisted as raw JSON bytes.
    """

    def read_raw(self) -> bytes | None:
        """Return the stored bytes exactly, or None if nothing was stored yet."""
        ...

    def replace_raw(self, body: bytes) -> None:
        """Replace the stored document atomically."""
        ...


class DiskSiteDocumentStore(SiteDocumentStore):
    """
    Keeps the site document in one file.

    - Reads take no lock and never re-serialize.
    - Writes go through a temp sibling + rename, so readers only ever see a
      complete document. Concurrent writers race on the rename: last one wins.
    - The parent directory is created on first write, not before.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read_raw(self) -> bytes | None:
        return read_bytes(self._path)

    def replace_raw(self, body: bytes) -> None:
        atomic_write_bytes(self._path, body)


class AsyncSiteDocumentRepository:
    """
    Async wrapper around a site document store.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, store: SiteDocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> SiteDocumentStore:
        return self._store

    async def read_raw(self) -> bytes | None:
        return await asyncio.to_thread(self._store.read_raw)

    async def replace_raw(self, body: bytes) -> None:
        await asyncio.to_thread(self._store.replace_raw, body)
