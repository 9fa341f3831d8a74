"""Decides which copy of the site document an editor sees, and keeps the local cache in step."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from persistence.site_document import missing_required_field, normalize_site_document

from .api_settings import ApiSettings, load_api_settings, save_api_settings
from .local_cache import SITE_DATA_KEY, LocalCache
from .remote import CredentialMissingError, SiteApiClient, SyncError

logger = logging.getLogger(__name__)

BUNDLED_DEFAULT_PATH = Path(__file__).with_name("default_site.json")

MSG_REQUIRED_FIELDS = "Brand name, phone, email, and address are required."
MSG_IMPORTED = "JSON imported successfully."
MSG_INVALID_IMPORT = "Invalid JSON file."
MSG_RESET = "Reset to default data."
MSG_API_SETTINGS_SAVED = "API settings saved."


class LoadSource(str, enum.Enum):
    CACHE = "cache"
    REMOTE = "remote"
    DEFAULT = "default"

    @property
    def message(self) -> str:
        return {
            LoadSource.CACHE: "Loaded from local cache.",
            LoadSource.REMOTE: "Loaded from API.",
            LoadSource.DEFAULT: "API not reachable. Loaded default data.",
        }[self]


class SaveOutcome(str, enum.Enum):
    SAVED = "saved"
    CACHED_NO_KEY = "cached_no_key"
    CACHED_UNREACHABLE = "cached_unreachable"
    INVALID = "invalid"

    @property
    def message(self) -> str:
        return {
            SaveOutcome.SAVED: "Saved to API and local cache.",
            SaveOutcome.CACHED_NO_KEY: "Saved locally. API key missing.",
            SaveOutcome.CACHED_UNREACHABLE: "Saved locally. API not reachable.",
            SaveOutcome.INVALID: MSG_REQUIRED_FIELDS,
        }[self]


@dataclass(frozen=True)
class SaveResult:
    outcome: SaveOutcome

    @property
    def message(self) -> str:
        return self.outcome.message

    @property
    def remote_saved(self) -> bool:
        return self.outcome is SaveOutcome.SAVED

    @property
    def cached(self) -> bool:
        return self.outcome is not SaveOutcome.INVALID


class InvalidDocumentError(ValueError):
    """An imported document was not a JSON object."""


class SaveInProgressError(RuntimeError):
    """A second save was started on a session while one was still running."""


@dataclass
class SiteSession:
    """Editor state for one session: the working document and where it came from."""

    document: dict[str, Any]
    source: LoadSource
    api_settings: ApiSettings = field(default_factory=ApiSettings)
    saving: bool = False

    @property
    def message(self) -> str:
        return self.source.message


def load_bundled_default(path: Path = BUNDLED_DEFAULT_PATH) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise InvalidDocumentError(f"bundled default at {path} is not a JSON object")
    return data


class SiteSyncAdapter:
    def __init__(
        self,
        cache: LocalCache,
        client: SiteApiClient,
        *,
        default_path: Path = BUNDLED_DEFAULT_PATH,
    ) -> None:
        self._cache = cache
        self._client = client
        self._default_path = default_path

    def load(self) -> SiteSession:
        """
        Local cache first, then the remote endpoint, then the bundled default.
        Whatever wins is normalized before it reaches the session.
        """
        api_settings = load_api_settings(self._cache)

        cached = self._cache.get(SITE_DATA_KEY)
        if isinstance(cached, dict):
            return SiteSession(normalize_site_document(cached), LoadSource.CACHE, api_settings)

        try:
            remote = self._client.fetch(api_settings.effective_url)
        except SyncError as e:
            logger.warning("SYNC LOAD: remote unavailable, using bundled default: %s", e)
            document = load_bundled_default(self._default_path)
            return SiteSession(normalize_site_document(document), LoadSource.DEFAULT, api_settings)

        return SiteSession(normalize_site_document(remote), LoadSource.REMOTE, api_settings)

    def save(self, session: SiteSession) -> SaveResult:
        """
        Push the session document to the remote endpoint and always mirror it
        into the local cache, whatever the remote said.
        """
        if session.saving:
            raise SaveInProgressError("a save is already running for this session")

        if missing_required_field(session.document) is not None:
            return SaveResult(SaveOutcome.INVALID)

        session.saving = True
        try:
            settings = session.api_settings
            try:
                self._client.replace(settings.effective_url, settings.apiKey, session.document)
                outcome = SaveOutcome.SAVED
            except CredentialMissingError:
                outcome = SaveOutcome.CACHED_NO_KEY
            except SyncError as e:
                logger.warning("SYNC SAVE: remote save failed, caching only: %s", e)
                outcome = SaveOutcome.CACHED_UNREACHABLE

            self._cache.set(SITE_DATA_KEY, session.document)
        finally:
            session.saving = False

        return SaveResult(outcome)

    def import_document(self, session: SiteSession, text: str) -> str:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidDocumentError(MSG_INVALID_IMPORT) from e
        if not isinstance(data, dict):
            raise InvalidDocumentError(MSG_INVALID_IMPORT)

        session.document = normalize_site_document(data)
        self._cache.set(SITE_DATA_KEY, session.document)
        return MSG_IMPORTED

    @staticmethod
    def export_document(session: SiteSession) -> str:
        return json.dumps(session.document, indent=2, ensure_ascii=False)

    def reset(self, session: SiteSession) -> str:
        self._cache.remove(SITE_DATA_KEY)
        session.document = normalize_site_document(load_bundled_default(self._default_path))
        session.source = LoadSource.DEFAULT
        return MSG_RESET

    def update_api_settings(
        self,
        session: SiteSession,
        *,
        api_url: str | None = None,
        api_key: str | None = None,
    ) -> str:
        updates: dict[str, Any] = {}
        if api_url is not None:
            updates["apiUrl"] = api_url
        if api_key is not None:
            updates["apiKey"] = api_key
        session.api_settings = session.api_settings.model_copy(update=updates)
        save_api_settings(self._cache, session.api_settings)
        return MSG_API_SETTINGS_SAVED
