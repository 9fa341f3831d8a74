from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    # Security
    api_key: str = ""

    # CORS (disabled when empty)
    allowed_origins: tuple[str, ...] = field(default_factory=tuple)

    # Persistence
    data_path: str = ""
    content_root: str = ""

    # Logging
    log_level: str = "INFO"
    debug_log_requests: bool = True


def get_settings() -> Settings:
    # NOTE: no default key on purpose; an unset SITE_API_KEY rejects every write.
    api_key = os.getenv("SITE_API_KEY", "")

    allowed_origins = _env_list("SITE_ALLOWED_ORIGINS")

    data_path = os.getenv("SITE_DATA_PATH", "")
    content_root = os.getenv("SITE_CONTENT_ROOT", "") or os.getcwd()

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)

    return Settings(
        api_key=api_key,
        allowed_origins=allowed_origins,
        data_path=data_path,
        content_root=content_root,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )


def resolve_document_path(configured: str, content_root: str | Path) -> Path:
    """
    Resolve where the site document lives.

    - blank -> <content_root>/../data/site.json
    - absolute -> used as-is
    - relative -> resolved against content_root

    Pure path arithmetic: nothing is created here.
    """
    root = Path(content_root)
    configured = (configured or "").strip()
    if not configured:
        return Path(os.path.abspath(root / ".." / "data" / "site.json"))

    path = Path(configured)
    if path.is_absolute():
        return path
    return Path(os.path.abspath(root / path))
