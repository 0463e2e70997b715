"""
Reader Session Registry - in-memory map of reader id to adapter session.

An overlay rendered by one request must receive the reader's later click,
so the adapter and its document live here between requests. Nothing is
persisted; the least recently used session is evicted when full.
"""

from collections import OrderedDict
from dataclasses import dataclass, field

import httpx
from structlog import get_logger

from paywall_access.models.domain import ReaderContext
from paywall_access.models.vendor import AdapterConfig
from paywall_access.services.access_source import UrlAccessSource
from paywall_access.services.dom import Document
from paywall_access.services.fewcents_vendor import AUTHORIZATION_TIMEOUT, FewcentsVendor
from paywall_access.services.styles import TAG
from paywall_access.services.vsync import Vsync
from paywall_access.services.xhr import Xhr

logger = get_logger(__name__)


@dataclass
class ReaderSession:
    """Everything needed to serve one reader's overlay."""

    reader_id: str
    vendor: FewcentsVendor
    document: Document
    access_source: UrlAccessSource
    xhr: Xhr
    redirects: list[str] = field(default_factory=list)


class ReaderSessionRegistry:
    """Bounded LRU registry of reader sessions."""

    def __init__(self, max_sessions: int) -> None:
        if max_sessions <= 0:
            raise ValueError(f"max_sessions must be positive: {max_sessions}")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, ReaderSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, reader_id: object) -> bool:
        return reader_id in self._sessions

    def get(self, reader_id: str) -> ReaderSession | None:
        session = self._sessions.get(reader_id)
        if session is not None:
            self._sessions.move_to_end(reader_id)
        return session

    def put(self, session: ReaderSession) -> None:
        self._sessions[session.reader_id] = session
        self._sessions.move_to_end(session.reader_id)
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.debug("reader_session_evicted", reader_id=evicted_id)

    def remove(self, reader_id: str) -> ReaderSession | None:
        return self._sessions.pop(reader_id, None)


def create_reader_session(
    reader: ReaderContext,
    adapter_config: AdapterConfig,
    http_client: httpx.AsyncClient,
    cookies: dict[str, str] | None = None,
    authorization_timeout: float = AUTHORIZATION_TIMEOUT,
) -> ReaderSession:
    """Build a document with the overlay dialog container and an adapter bound to it."""
    document = Document()
    container = document.create_element("div")
    container.id = f"{TAG}-dialog"
    document.body.append_child(container)

    redirects: list[str] = []
    access_source = UrlAccessSource(
        adapter_config.model_dump(by_alias=True, exclude_none=True),
        reader,
        navigator=redirects.append,
    )
    xhr = Xhr(http_client, reader_cookies=cookies)
    vendor = FewcentsVendor(
        access_source,
        document,
        xhr,
        Vsync(),
        authorization_timeout=authorization_timeout,
    )
    return ReaderSession(
        reader_id=reader.reader_id,
        vendor=vendor,
        document=document,
        access_source=access_source,
        xhr=xhr,
        redirects=redirects,
    )
