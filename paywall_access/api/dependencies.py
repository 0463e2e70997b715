"""
API Dependencies - Shared HTTP client and reader session registry.
"""

import httpx

from paywall_access.config import settings
from paywall_access.services.session_registry import ReaderSessionRegistry

_http_client: httpx.AsyncClient | None = None
_session_registry: ReaderSessionRegistry | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get the shared vendor HTTP client."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient()
    return _http_client


def get_session_registry() -> ReaderSessionRegistry:
    """Get the process-wide reader session registry."""
    global _session_registry
    if _session_registry is None:
        _session_registry = ReaderSessionRegistry(settings.max_reader_sessions)
    return _session_registry


async def close_http_client() -> None:
    """Close the shared HTTP client on shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
