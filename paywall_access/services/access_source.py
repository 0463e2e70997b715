"""
URL-variable access source.

Decorates vendor URLs with reader context the way the hosting document's
access source does: known variable names in a URL template are replaced
with URL-encoded values.
"""

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from structlog import get_logger

from paywall_access.models.domain import ReaderContext

logger = get_logger(__name__)

_AUTHDATA_PATTERN = re.compile(r"AUTHDATA\(([A-Za-z0-9_.]+)\)")


def _encode(value: str) -> str:
    return quote(value, safe="")


class UrlAccessSource:
    """Access source for one reader on one article."""

    def __init__(
        self,
        adapter_config: dict[str, Any],
        reader: ReaderContext,
        navigator: Callable[[str], None] | None = None,
    ) -> None:
        self._adapter_config = adapter_config
        self.reader = reader
        self._navigator = navigator
        self.navigations: list[str] = []

    def get_adapter_config(self) -> dict[str, Any]:
        return self._adapter_config

    async def build_url(self, url: str, use_auth_data: bool) -> str:
        """Replace CANONICAL_URL, READER_ID and, if allowed, AUTHDATA(field)."""
        url = url.replace("CANONICAL_URL", _encode(self.reader.canonical_url))
        url = url.replace("READER_ID", _encode(self.reader.reader_id))
        if use_auth_data:
            url = _AUTHDATA_PATTERN.sub(
                lambda m: _encode(str(self.reader.auth_data.get(m.group(1), ""))), url
            )
        return url

    async def get_login_url(self, url: str) -> str:
        return url.replace("RETURN_URL", _encode(self.reader.return_url))

    def login_with_url(self, url: str) -> None:
        """Resolve RETURN_URL and navigate the reader to the vendor."""
        target = url.replace("RETURN_URL", _encode(self.reader.return_url))
        logger.info("reader_login_redirect", reader_id=self.reader.reader_id, url=target)
        self.navigations.append(target)
        if self._navigator is not None:
            self._navigator(target)
