from __future__ import annotations

import copy
import json
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

MSG_EMPTY_BODY = "Empty request body."
MSG_INVALID_PAYLOAD = "Invalid JSON payload."
MSG_INVALID_FORMAT = "Invalid JSON format."
MSG_MISSING_BRAND_NAME = "Missing required field: brand.name."
MSG_MISSING_CONTACT = "Missing required field: contact."
MSG_MISSING_CONTACT_PHONE = "Missing required field: contact.phone."
MSG_MISSING_CONTACT_EMAIL = "Missing required field: contact.email."
MSG_MISSING_CONTACT_ADDRESS = "Missing required field: contact.address."


class SiteValidationError(ValueError):
    """A site payload failed validation; `message` is safe to show to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -------------------------------------------------------------------
# Section defaults
# -------------------------------------------------------------------
class BrandSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    tagline: str = ""


class ContactSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    phone: str = ""
    email: str = ""
    address: str = ""


class SocialSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    facebook: str = ""
    instagram: str = ""
    whatsapp: str = ""
    x: str = ""


class HeroSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    subtitle: str = ""
    ctaPrimary: str = ""
    ctaSecondary: str = ""
    heroImage: str = ""


class AboutSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""
    stats: list[Any] = Field(default_factory=list)


class FooterSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    copyrightText: str = ""


def _is_unset(value: Any) -> bool:
    """True for the values an editor treats as "nothing here": null, false, "", 0."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


class SiteDocument(BaseModel):
    """
    Fully populated view of the site document.

    Sections keep whatever value the source had; only unset sections get their
    empty default. Unknown top-level keys ride along as extras.
    """

    model_config = ConfigDict(extra="allow")

    brand: Any = Field(default_factory=lambda: BrandSection().model_dump())
    contact: Any = Field(default_factory=lambda: ContactSection().model_dump())
    social: Any = Field(default_factory=lambda: SocialSection().model_dump())
    hero: Any = Field(default_factory=lambda: HeroSection().model_dump())
    services: Any = Field(default_factory=list)
    solutions: Any = Field(default_factory=list)
    projects: Any = Field(default_factory=list)
    about: Any = Field(default_factory=lambda: AboutSection().model_dump())
    testimonials: Any = Field(default_factory=list)
    footer: Any = Field(default_factory=lambda: FooterSection().model_dump())

    @field_validator("*", mode="before")
    @classmethod
    def _default_unset_sections(cls, value: Any, info: ValidationInfo) -> Any:
        if _is_unset(value):
            return cls.model_fields[info.field_name].default_factory()
        return value

    @model_validator(mode="after")
    def _default_about_stats(self) -> "SiteDocument":
        if isinstance(self.about, dict) and _is_unset(self.about.get("stats")):
            self.about = {**self.about, "stats": []}
        return self

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any] | None) -> "SiteDocument":
        return cls.model_validate(copy.deepcopy(dict(doc or {})))

    def to_doc(self) -> dict[str, Any]:
        return self.model_dump()


def normalize_site_document(doc: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fill every absent section with its empty default. Idempotent."""
    return SiteDocument.from_doc(doc).to_doc()


# -------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------
def _has_text(section: Any, name: str) -> bool:
    if not isinstance(section, Mapping):
        return False
    value = section.get(name)
    return isinstance(value, str) and bool(value.strip())


def missing_required_field(doc: Mapping[str, Any]) -> str | None:
    """
    Return the message for the first missing/blank required field, or None.

    Order: brand.name, contact, contact.phone, contact.email, contact.address.
    """
    if not _has_text(doc.get("brand"), "name"):
        return MSG_MISSING_BRAND_NAME

    contact = doc.get("contact")
    if not isinstance(contact, Mapping):
        return MSG_MISSING_CONTACT
    if not _has_text(contact, "phone"):
        return MSG_MISSING_CONTACT_PHONE
    if not _has_text(contact, "email"):
        return MSG_MISSING_CONTACT_EMAIL
    if not _has_text(contact, "address"):
        return MSG_MISSING_CONTACT_ADDRESS
    return None


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {token}")


def validate_site_payload(body: bytes | str) -> dict[str, Any]:
    """
    Validate a raw request body and return the parsed document.

    Raises SiteValidationError with a distinct message for the first failing check.
    """
    if isinstance(body, bytes):
        try:
            text = body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise SiteValidationError(MSG_INVALID_PAYLOAD) from e
    else:
        text = body

    if not text.strip():
        raise SiteValidationError(MSG_EMPTY_BODY)

    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise SiteValidationError(MSG_INVALID_PAYLOAD) from e

    if not isinstance(parsed, dict):
        raise SiteValidationError(MSG_INVALID_FORMAT)

    error = missing_required_field(parsed)
    if error is not None:
        raise SiteValidationError(error)
    return parsed
