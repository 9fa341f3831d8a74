"""HTTP client for the site document endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class SyncError(RuntimeError):
    """Base class for failures talking to the remote site endpoint."""


class RemoteUnavailableError(SyncError):
    """Transport failure, non-2xx status, or an unusable response body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CredentialMissingError(SyncError):
    """No API key configured, so a write was never attempted."""


class SiteApiClient:
    """Thin wrapper over an httpx.Client for GET/POST of the site document."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def fetch(self, url: str) -> dict[str, Any]:
        try:
            response = self._http.get(url, headers={"Cache-Control": "no-store"})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteUnavailableError(f"GET {url} failed: {e!r}") from e

        if not response.is_success:
            raise RemoteUnavailableError(
                f"GET {url} returned {response.status_code}", status_code=response.status_code
            )
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteUnavailableError(f"GET {url} returned malformed JSON") from e
        if not isinstance(data, dict):
            raise RemoteUnavailableError(f"GET {url} returned a non-object document")
        return data

    def replace(self, url: str, api_key: str | None, document: dict[str, Any]) -> None:
        if not (api_key or "").strip():
            raise CredentialMissingError("API key missing")

        body = json.dumps(document, ensure_ascii=False).encode("utf-8")
        try:
            response = self._http.post(
                url,
                content=body,
                headers={"Content-Type": "application/json", API_KEY_HEADER: api_key},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteUnavailableError(f"POST {url} failed: {e!r}") from e

        if not response.is_success:
            logger.info("REMOTE SAVE: %s rejected with %s", url, response.status_code)
            raise RemoteUnavailableError(
                f"POST {url} returned {response.status_code}", status_code=response.status_code
            )
