"""
Origin-scoped key/value storage shared by browsing contexts.

Writes are published to every other context subscribed to the same
``SharedStorage``, mirroring how the browser fires ``storage`` events.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..middleware.logging_config import LoggerMixin


@dataclass(frozen=True)
class StorageEvent:
    """A single storage mutation as seen by other contexts."""
    key: str
    old_value: Optional[str]
    new_value: Optional[str]
    source: str


StorageListener = Callable[[StorageEvent], None]


class KeyValueStore(ABC):
    """Abstract base class for the storage backend."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, if any."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys."""
        pass


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory backend, one per origin."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._store[key] = value

    def remove_item(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._store)


class SharedStorage(LoggerMixin):
    """Storage for one origin plus its mutation channel."""

    def __init__(self, backend: Optional[KeyValueStore] = None):
        self.backend = backend or InMemoryKeyValueStore()
        self._subscribers: List[Tuple[str, StorageListener]] = []

    def subscribe(self, context_id: str, listener: StorageListener) -> None:
        self._subscribers.append((context_id, listener))

    def unsubscribe(self, context_id: str, listener: Optional[StorageListener] = None) -> None:
        """Drop one listener, or every listener of a context."""
        self._subscribers = [
            (cid, fn) for cid, fn in self._subscribers
            if not (cid == context_id and (listener is None or fn == listener))
        ]

    def get_item(self, key: str) -> Optional[str]:
        return self.backend.get_item(key)

    def keys(self) -> List[str]:
        return self.backend.keys()

    def set_item(self, key: str, value: str, source: str) -> None:
        old_value = self.backend.get_item(key)
        self.backend.set_item(key, value)
        if old_value != value:
            self._publish(StorageEvent(key, old_value, value, source))

    def remove_item(self, key: str, source: str) -> None:
        old_value = self.backend.get_item(key)
        if old_value is None:
            return
        self.backend.remove_item(key)
        self._publish(StorageEvent(key, old_value, None, source))

    def _publish(self, event: StorageEvent) -> None:
        # The writer never sees its own event
        for context_id, listener in list(self._subscribers):
            if context_id == event.source:
                continue
            try:
                listener(event)
            except Exception:
                self.logger.exception(f"Storage listener failed for key {event.key}")


class StorageArea:
    """One browsing context's view of the shared storage."""

    def __init__(self, shared: SharedStorage, context_id: str):
        self.shared = shared
        self.context_id = context_id

    def get_item(self, key: str) -> Optional[str]:
        return self.shared.get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self.shared.set_item(key, value, source=self.context_id)

    def remove_item(self, key: str) -> None:
        self.shared.remove_item(key, source=self.context_id)

    def keys(self) -> List[str]:
        return self.shared.keys()

    def add_listener(self, listener: StorageListener) -> None:
        self.shared.subscribe(self.context_id, listener)

    def remove_listener(self, listener: StorageListener) -> None:
        self.shared.unsubscribe(self.context_id, listener)

    def remove_all_listeners(self) -> None:
        self.shared.unsubscribe(self.context_id)
