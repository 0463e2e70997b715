"""
Adapter Ports - Host capabilities the paywall adapter depends on.

Every collaborator is passed to the adapter at construction. Any host
(in-process document, browser bridge, test double) must implement these.
"""

from collections.abc import Callable
from typing import Any, Protocol

import httpx

from paywall_access.services.dom import Element


class AccessSource(Protocol):
    """
    Access source protocol.

    Supplies the adapter config and decorates URLs with reader context.
    """

    def get_adapter_config(self) -> dict[str, Any]:
        """Return the raw adapter config declared by the hosting document."""
        ...

    async def build_url(self, url: str, use_auth_data: bool) -> str:
        """
        Substitute reader/session variables into a URL.

        Args:
            url: URL template containing variables such as READER_ID
            use_auth_data: Whether AUTHDATA(field) variables may be resolved

        Returns:
            Decorated URL
        """
        ...

    async def get_login_url(self, url: str) -> str:
        """Resolve a URL for use as a login URL (fills RETURN_URL)."""
        ...

    def login_with_url(self, url: str) -> None:
        """Hand the reader off to a vendor login or purchase flow."""
        ...


class JsonFetcher(Protocol):
    """HTTP client protocol for JSON vendor calls."""

    async def fetch_json(self, url: str, credentials: str = "omit") -> httpx.Response:
        """
        Fetch a URL expecting JSON.

        Raises:
            UnexpectedStatusError: If the response status is not 2xx
        """
        ...


class MutationScheduler(Protocol):
    """Scheduler protocol for batched visual mutations."""

    def mutate_promise(self, mutator: Callable[[], Any]) -> Any:
        """Schedule a mutator; the returned awaitable resolves after it ran."""
        ...


class ElementHost(Protocol):
    """Document protocol for element lookup, creation and style installation."""

    head: Element
    installed_styles: dict[str, Element]

    def create_element(self, tag: str) -> Element:
        ...

    def get_element_by_id(self, element_id: str) -> Element | None:
        ...
