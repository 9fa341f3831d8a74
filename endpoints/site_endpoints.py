# site_endpoints.py
from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from persistence.site_document import SiteValidationError, validate_site_payload
from persistence.site_store import AsyncSiteDocumentRepository
from settings import Settings

router = APIRouter(tags=["site"])
logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


def _repo(request: Request) -> AsyncSiteDocumentRepository:
    return request.app.state.site_repo


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _is_authorized(supplied: str | None, required: str) -> bool:
    """
    Exact, case-sensitive match against the configured key.
    A blank configured key authorizes nothing.
    """
    if not required.strip():
        logger.warning("SITE POST: rejected, no API key configured")
        return False
    if supplied is None or not secrets.compare_digest(supplied.encode("utf-8"), required.encode("utf-8")):
        logger.info("SITE POST: rejected, bad or missing %s", API_KEY_HEADER)
        return False
    return True


@router.get("/api/site")
async def get_site(request: Request):
    repo = _repo(request)
    raw = await repo.read_raw()
    if raw is None:
        if _settings(request).debug_log_requests:
            logger.info("SITE GET: no document at %s", repo.store.path)
        return JSONResponse({"message": "Site data not found."}, status_code=404)

    if _settings(request).debug_log_requests:
        logger.info("SITE GET: %d bytes", len(raw))
    return Response(content=raw, media_type="application/json")


@router.post("/api/site")
async def replace_site(request: Request):
    settings = _settings(request)

    if not _is_authorized(request.headers.get(API_KEY_HEADER), settings.api_key):
        raise HTTPException(status_code=401, detail="unauthorized")

    body = await request.body()
    try:
        validate_site_payload(body)
    except SiteValidationError as e:
        logger.info("SITE POST: invalid payload: %s", e.message)
        return JSONResponse({"message": e.message}, status_code=400)

    repo = _repo(request)
    try:
        await repo.replace_raw(body)
    except OSError:
        logger.exception("SITE POST: failed to write %s", repo.store.path)
        return JSONResponse({"message": "Failed to write site data."}, status_code=500)

    if settings.debug_log_requests:
        logger.info("SITE POST: stored %d bytes at %s", len(body), repo.store.path)
    return {"ok": True}
