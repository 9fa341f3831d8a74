from __future__ import annotations

from .adapter import (
    LoadSource,
    SaveInProgressError,
    SaveOutcome,
    SaveResult,
    SiteSession,
    SiteSyncAdapter,
)
from .api_settings import DEFAULT_API_URL, ApiSettings
from .local_cache import LocalCache
from .remote import CredentialMissingError, RemoteUnavailableError, SiteApiClient, SyncError

__all__ = [
    "ApiSettings",
    "CredentialMissingError",
    "DEFAULT_API_URL",
    "LoadSource",
    "LocalCache",
    "RemoteUnavailableError",
    "SaveInProgressError",
    "SaveOutcome",
    "SaveResult",
    "SiteApiClient",
    "SiteSession",
    "SiteSyncAdapter",
    "SyncError",
]
