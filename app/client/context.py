"""
Browsing contexts (tabs and popups) that share one origin's storage.
"""
import uuid
from typing import Dict, List, Optional
from urllib.parse import parse_qsl, urlparse

from ..middleware.logging_config import LoggerMixin
from .storage import SharedStorage, StorageArea


class BrowserContext(LoggerMixin):
    """A tab or popup window."""

    def __init__(
        self,
        shared_storage: SharedStorage,
        url: str = "/",
        name: str = "main",
        opener: Optional["BrowserContext"] = None
    ):
        self.context_id = uuid.uuid4().hex
        self.name = name
        self.opener = opener
        self.shared_storage = shared_storage
        self.storage = StorageArea(shared_storage, self.context_id)
        self.location = url
        self.history: List[str] = [url]
        self.closed = False
        self.children: List["BrowserContext"] = []

    @property
    def query_params(self) -> Dict[str, str]:
        return dict(parse_qsl(urlparse(self.location).query))

    @property
    def path(self) -> str:
        return urlparse(self.location).path or "/"

    def navigate(self, url: str) -> None:
        self.logger.debug(f"Context {self.name} navigating to {urlparse(url).path}")
        self.location = url
        self.history.append(url)

    def open(self, url: str, name: str) -> "BrowserContext":
        """Open a secondary context sharing this context's storage."""
        child = BrowserContext(self.shared_storage, url=url, name=name, opener=self)
        self.children.append(child)
        return child

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.storage.remove_all_listeners()
        self.logger.debug(f"Context {self.name} closed")
