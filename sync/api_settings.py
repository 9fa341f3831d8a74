from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError

from .local_cache import API_SETTINGS_KEY, LocalCache

DEFAULT_API_URL = "http://localhost:5205/api/site"


class ApiSettings(BaseModel):
    """
    Where the editor syncs to. Stored apart from the site document as
    {"apiUrl": ..., "apiKey": ...}; both optional.
    """

    model_config = ConfigDict(extra="ignore")

    apiUrl: str | None = None
    apiKey: str | None = None

    @property
    def effective_url(self) -> str:
        url = (self.apiUrl or "").strip()
        return url or DEFAULT_API_URL

    @property
    def has_key(self) -> bool:
        return bool((self.apiKey or "").strip())


def load_api_settings(cache: LocalCache) -> ApiSettings:
    raw = cache.get(API_SETTINGS_KEY)
    if not isinstance(raw, dict):
        return ApiSettings()
    try:
        return ApiSettings.model_validate(raw)
    except ValidationError:
        return ApiSettings()


def save_api_settings(cache: LocalCache, settings: ApiSettings) -> None:
    cache.set(API_SETTINGS_KEY, settings.model_dump(mode="json"))
