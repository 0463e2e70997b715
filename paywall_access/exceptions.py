"""
Exception Classes - Strongly typed exception hierarchy.

NO DICTIONARIES - All exceptions have typed attributes.
"""

import httpx


class AccessVendorError(Exception):
    """Base exception for all paywall access errors."""

    pass


class NoMatchingConfigurationError(AccessVendorError):
    """Raised when the vendor has no paid-content configuration for an article (HTTP 204)."""

    def __init__(self, article_id: str | None = None) -> None:
        self.article_id = article_id
        super().__init__(
            "No merchant domains have been matched for this article, "
            "or no paid content configurations are setup."
        )


class AuthorizationTimeoutError(AccessVendorError):
    """Raised when the authorization request exceeds its time budget."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Authorization timed out after {int(timeout_seconds * 1000)} ms")


class UnexpectedStatusError(AccessVendorError):
    """Raised by the JSON fetcher for any non-2xx vendor response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.status_code = response.status_code
        super().__init__(f"Unexpected vendor status: {response.status_code}")


class MalformedPurchaseConfigError(AccessVendorError):
    """Describes a 402 body that could not be parsed. Recorded, never raised."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed purchase config: {reason}")


class ContainerNotFoundError(AccessVendorError):
    """Raised when the overlay dialog container is missing from the document."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"No element found with id {element_id}")
