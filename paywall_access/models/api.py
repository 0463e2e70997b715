"""
API Models - Pydantic models for request/response validation.

NO DICTIONARIES - All API contracts are strongly typed.
"""

from enum import Enum

from pydantic import BaseModel, Field

from paywall_access.models.vendor import AdapterConfig


class ClickTarget(str, Enum):
    """Overlay controls a reader can click."""

    PURCHASE = "purchase"
    ALREADY_PURCHASED = "already_purchased"


class AuthorizeRequest(BaseModel):
    """Request to check a reader's access to an article."""

    canonical_url: str = Field(..., min_length=1, description="Canonical article URL")
    return_url: str = Field(..., min_length=1, description="Where the vendor returns the reader")
    reader_id: str | None = Field(
        None, min_length=1, max_length=255, description="Existing reader id, if any"
    )
    adapter_config: AdapterConfig
    cookies: dict[str, str] = Field(default_factory=dict, description="Reader cookies")
    auth_data: dict[str, str] = Field(default_factory=dict)


class AuthorizeResponse(BaseModel):
    """Authorization result, with the overlay markup when access is denied."""

    reader_id: str
    access: bool
    overlay_html: str | None = None


class ClickRequest(BaseModel):
    target: ClickTarget


class ClickResponse(BaseModel):
    """Where the reader should be sent after a click."""

    reader_id: str
    target: ClickTarget
    redirect_url: str | None = None
    default_prevented: bool
