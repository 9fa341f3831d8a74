from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing files, empty files, or invalid JSON.
    """
    try:
        if not path.exists():
            return None
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return None
        return json.loads(raw)
    except (OSError, ValueError):
        return None


def read_bytes(path: Path) -> bytes | None:
    """Return the exact file contents, or None if the file does not exist."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Atomically replace `path` with `data`.

    The bytes go to a randomly named sibling (`<name>.<random>.tmp`) which is then
    renamed over the destination with os.replace. Readers see either the old or
    the new file. The temp file is removed if anything fails before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    with NamedTemporaryFile(
        "wb", dir=str(path.parent), prefix=f"{path.name}.", suffix=".tmp", delete=False
    ) as handle:
        tmp_name = handle.name
        try:
            # mkstemp creates 0600; the rename would carry that over.
            os.chmod(tmp_name, mode)
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            _unlink_quietly(tmp_name)
            raise

    try:
        os.replace(tmp_name, path)
    except BaseException:
        _unlink_quietly(tmp_name)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    serialized = json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
    atomic_write_text(path, serialized + "\n")


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask has no read-only form and flipping it later races other threads.
_UMASK = _read_umask()


def _target_mode(path: Path) -> int:
    """Keep an existing file's permissions, otherwise what open() would give a new file."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def _unlink_quietly(name: str) -> None:
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass
