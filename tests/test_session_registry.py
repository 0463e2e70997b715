"""
Tests for the reader session registry.
"""

import httpx
import pytest

from paywall_access.models.domain import ReaderContext
from paywall_access.models.vendor import AdapterConfig
from paywall_access.services.session_registry import (
    ReaderSessionRegistry,
    create_reader_session,
)
from paywall_access.services.styles import TAG


def _session(reader_id: str):
    reader = ReaderContext(
        canonical_url="https://news.example/a", reader_id=reader_id, return_url="https://r.test"
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    return create_reader_session(reader, AdapterConfig(article_title_selector="h1"), client)


class TestCreateReaderSession:
    def test_document_has_dialog_container(self):
        session = _session("r1")
        assert session.document.get_element_by_id(f"{TAG}-dialog") is not None
        assert session.vendor.render_container() is session.document.get_element_by_id(
            f"{TAG}-dialog"
        )

    def test_login_redirects_are_captured(self):
        session = _session("r1")
        session.access_source.login_with_url("https://fewcents.test/buy")
        assert session.redirects == ["https://fewcents.test/buy"]


class TestReaderSessionRegistry:
    def test_put_and_get(self):
        registry = ReaderSessionRegistry(max_sessions=2)
        session = _session("r1")
        registry.put(session)
        assert registry.get("r1") is session
        assert "r1" in registry
        assert len(registry) == 1

    def test_evicts_least_recently_used(self):
        registry = ReaderSessionRegistry(max_sessions=2)
        for reader_id in ("r1", "r2"):
            registry.put(_session(reader_id))
        registry.get("r1")
        registry.put(_session("r3"))

        assert "r1" in registry
        assert "r2" not in registry
        assert "r3" in registry

    def test_remove(self):
        registry = ReaderSessionRegistry(max_sessions=2)
        registry.put(_session("r1"))
        assert registry.remove("r1") is not None
        assert registry.remove("r1") is None

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            ReaderSessionRegistry(max_sessions=0)
