from __future__ import annotations

from .site_document import (
    SiteDocument,
    SiteValidationError,
    missing_required_field,
    normalize_site_document,
    validate_site_payload,
)
from .site_store import AsyncSiteDocumentRepository, DiskSiteDocumentStore, SiteDocumentStore

__all__ = [
    "SiteDocument",
    "SiteValidationError",
    "missing_required_field",
    "normalize_site_document",
    "validate_site_payload",
    "SiteDocumentStore",
    "DiskSiteDocumentStore",
    "AsyncSiteDocumentRepository",
]
