from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


API_KEY = "test-key-123"

VALID_DOC = (
    b'{"brand":{"name":"Acme"},'
    b'"contact":{"phone":"1","email":"a@b.com","address":"X"}}'
)


@pytest.fixture(autouse=True)
def sandbox_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point every env-driven setting at a temp directory so tests never touch real ./data.
    """
    content_root = tmp_path / "site"
    content_root.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SITE_CONTENT_ROOT", str(content_root))
    monkeypatch.setenv("SITE_API_KEY", API_KEY)
    monkeypatch.delenv("SITE_DATA_PATH", raising=False)
    monkeypatch.delenv("SITE_ALLOWED_ORIGINS", raising=False)
    return tmp_path


@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def valid_doc() -> bytes:
    return VALID_DOC


@pytest.fixture
def post_site():
    """POST a raw body to /api/site; key=None sends no x-api-key header."""

    def _post(client, body: bytes, key: str | None = API_KEY):
        headers = {"Content-Type": "application/json"}
        if key is not None:
            headers["x-api-key"] = key
        return client.post("/api/site", content=body, headers=headers)

    return _post


@pytest.fixture
def doc_path(tmp_path: Path) -> Path:
    return tmp_path / "store" / "site.json"


@pytest.fixture
def make_settings(doc_path: Path):
    from settings import Settings

    def _make(**overrides):
        values = {
            "api_key": API_KEY,
            "data_path": str(doc_path),
            "content_root": str(doc_path.parent.parent),
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def site_app(make_settings):
    import app as app_module

    return app_module.create_app(make_settings())


@pytest.fixture
def client(site_app):
    from fastapi.testclient import TestClient

    return TestClient(site_app)
