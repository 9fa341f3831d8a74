from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

from persistence.site_store import AsyncSiteDocumentRepository, DiskSiteDocumentStore
from settings import Settings, get_settings, resolve_document_path

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        load_dotenv("local.env")
        settings = get_settings()

    logging.basicConfig(level=settings.log_level)

    from endpoints.site_endpoints import router as site_router

    # Resolved once; nothing touches the disk until the first write.
    document_path = resolve_document_path(settings.data_path, settings.content_root)
    logger.info("SITE STORE: document path %s", document_path)

    app = FastAPI(title="Site content store")
    app.state.settings = settings
    app.state.site_repo = AsyncSiteDocumentRepository(DiskSiteDocumentStore(document_path))

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.allowed_origins),
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if not settings.api_key.strip():
        logger.warning("SITE STORE: SITE_API_KEY is not set; all writes will be rejected")

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    app.include_router(site_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="127.0.0.1", port=5205)
