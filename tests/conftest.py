"""
Pytest Configuration and Centralized Fixtures.

Provides reusable fakes and fixtures for testing:
- Adapter config and reader context
- In-memory document with the overlay dialog container
- Access source doubles that record URL decoration and login handoffs
- Vendor responses served through httpx.MockTransport
- Small helpers for building vendor responses and locating the dialog
"""

import os
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Set required environment variables BEFORE importing app modules
os.environ.setdefault("FEWCENTS_CONFIG_URL", "https://api.fewcents.test")
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "console")

from paywall_access.models.domain import ReaderContext
from paywall_access.services.dom import Document
from paywall_access.services.fewcents_vendor import FewcentsVendor
from paywall_access.services.styles import TAG
from paywall_access.services.vsync import Vsync
from paywall_access.services.xhr import Xhr

VENDOR_URL = "https://api.fewcents.test"

PURCHASE_CONFIG: dict[str, Any] = {
    "identify_url": "https://fewcents.test/identify?article=42",
    "purchase_options": {
        "title": "Single article",
        "description": "Unlock this article",
        "sales_model": "single_purchase",
        "purchase_url": "https://fewcents.test/buy/42",
        "price": {"amount": 0.5, "currency": "USD", "payment_model": "pay_now"},
        "expiry": {"unit": "day", "value": 1},
    },
}

Handler = Callable[[httpx.Request], Any]

# ============================================================================
# Config / Reader Fixtures
# ============================================================================


@pytest.fixture
def adapter_config() -> dict[str, Any]:
    """Adapter config as declared by a hosting document."""
    return {
        "articleTitleSelector": ".article-title",
        "configUrl": VENDOR_URL,
        "articleId": "art 42",
        "locale": "en",
    }


@pytest.fixture
def reader() -> ReaderContext:
    return ReaderContext(
        canonical_url="https://news.example/articles/42",
        reader_id="amp-reader-1",
        return_url="https://news.example/return",
    )


# ============================================================================
# Document Fixtures
# ============================================================================


def make_document() -> Document:
    """Create a document holding an empty overlay dialog container."""
    document = Document()
    container = document.create_element("div")
    container.id = f"{TAG}-dialog"
    document.body.append_child(container)
    return document


@pytest.fixture
def document() -> Document:
    return make_document()


@pytest.fixture
def vsync() -> Vsync:
    return Vsync()


# ============================================================================
# Access Source Fixtures
# ============================================================================


@pytest.fixture
def access_source(adapter_config: dict[str, Any]) -> MagicMock:
    """Access source double: decoration appends a marker, login is recorded."""
    source = MagicMock()
    source.get_adapter_config = MagicMock(return_value=adapter_config)
    source.build_url = AsyncMock(side_effect=lambda url, use_auth_data: f"{url}&decorated=1")
    source.get_login_url = AsyncMock(side_effect=lambda url: url)
    source.login_with_url = MagicMock()
    return source


# ============================================================================
# Vendor HTTP Fixtures
# ============================================================================


def make_xhr(handler: Handler) -> Xhr:
    """Xhr whose requests are answered by `handler`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Xhr(client, reader_cookies={"fc_session": "abc"})


def respond(status_code: int, json: Any = None, content: bytes | None = None) -> Handler:
    """Handler that always answers with the given status and body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if content is not None:
            return httpx.Response(status_code, content=content)
        if json is not None:
            return httpx.Response(status_code, json=json)
        return httpx.Response(status_code)

    return handler


@pytest.fixture
def vendor_factory(
    access_source: MagicMock, document: Document, vsync: Vsync
) -> Callable[..., FewcentsVendor]:
    """Build a vendor bound to the shared document, answering with `handler`."""

    def _create(handler: Handler, timeout: float = 3.0) -> FewcentsVendor:
        return FewcentsVendor(
            access_source,
            document,
            make_xhr(handler),
            vsync,
            authorization_timeout=timeout,
        )

    return _create


def dialog(document: Document):
    return document.get_element_by_id(f"{TAG}-dialog")
