from __future__ import annotations

import asyncio
import json
import stat
import threading

import pytest

import json_store
from persistence.site_store import AsyncSiteDocumentRepository, DiskSiteDocumentStore


def _doc(name: str, filler: str) -> bytes:
    return json.dumps(
        {
            "brand": {"name": name},
            "contact": {"phone": "1", "email": "a@b.com", "address": "X"},
            "services": [filler * 256 for _ in range(256)],
        }
    ).encode()


def test_read_raw_missing_returns_none(doc_path):
    store = DiskSiteDocumentStore(doc_path)
    assert store.read_raw() is None
    assert not doc_path.parent.exists()


def test_async_repository_roundtrip(doc_path):
    async def _run():
        repo = AsyncSiteDocumentRepository(DiskSiteDocumentStore(doc_path))
        assert await repo.read_raw() is None

        await repo.replace_raw(b'{"a": 1}')
        assert await repo.read_raw() == b'{"a": 1}'

        await repo.replace_raw(b'{"a": 2}')
        assert await repo.read_raw() == b'{"a": 2}'

    asyncio.run(_run())


def test_failed_rename_keeps_previous_document_and_cleans_up(doc_path, monkeypatch):
    store = DiskSiteDocumentStore(doc_path)
    store.replace_raw(b'{"v": "old"}')

    def _boom(src, dst):
        raise OSError("disk on fire")

    with monkeypatch.context() as m:
        m.setattr(json_store.os, "replace", _boom)
        with pytest.raises(OSError):
            store.replace_raw(b'{"v": "new"}')

    assert store.read_raw() == b'{"v": "old"}'
    assert [p.name for p in doc_path.parent.iterdir()] == ["site.json"]


def test_failed_write_cleans_up_temp_file(doc_path, monkeypatch):
    store = DiskSiteDocumentStore(doc_path)
    store.replace_raw(b'{"v": "old"}')

    def _boom(fd):
        raise OSError("fsync failed")

    with monkeypatch.context() as m:
        m.setattr(json_store.os, "fsync", _boom)
        with pytest.raises(OSError):
            store.replace_raw(b'{"v": "new"}')

    assert store.read_raw() == b'{"v": "old"}'
    assert [p.name for p in doc_path.parent.iterdir()] == ["site.json"]


def test_concurrent_writers_and_readers_never_see_a_mix(doc_path):
    store = DiskSiteDocumentStore(doc_path)
    d0 = _doc("Zero", "z")
    d1 = _doc("One", "a")
    d2 = _doc("Two", "b")
    store.replace_raw(d0)

    seen: list[bytes | None] = []
    stop = threading.Event()

    def _writer(body: bytes) -> None:
        for _ in range(20):
            store.replace_raw(body)

    def _reader() -> None:
        while not stop.is_set():
            seen.append(store.read_raw())

    reader = threading.Thread(target=_reader)
    writers = [threading.Thread(target=_writer, args=(d,)) for d in (d1, d2)]
    reader.start()
    for t in writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    reader.join()

    assert store.read_raw() in (d1, d2)
    assert all(s in (d0, d1, d2) for s in seen)
    assert [p.name for p in doc_path.parent.iterdir()] == ["site.json"]


def test_atomic_write_json_and_read_json(tmp_path):
    target = tmp_path / "nested" / "doc.json"
    json_store.atomic_write_json(target, {"b": 1, "a": [1, 2]})
    assert json_store.read_json(target) == {"a": [1, 2], "b": 1}

    target.write_text("{broken", encoding="utf-8")
    assert json_store.read_json(target) is None
    assert json_store.read_json(tmp_path / "missing.json") is None


def test_new_document_gets_umask_permissions(doc_path):
    store = DiskSiteDocumentStore(doc_path)
    store.replace_raw(b'{"v": 1}')
    assert stat.S_IMODE(doc_path.stat().st_mode) == 0o666 & ~json_store._UMASK


def test_replace_keeps_existing_permissions(doc_path):
    store = DiskSiteDocumentStore(doc_path)
    store.replace_raw(b'{"v": 1}')
    doc_path.chmod(0o644)

    store.replace_raw(b'{"v": 2}')
    assert stat.S_IMODE(doc_path.stat().st_mode) == 0o644

    doc_path.chmod(0o640)
    store.replace_raw(b'{"v": 3}')
    assert stat.S_IMODE(doc_path.stat().st_mode) == 0o640
