"""In-memory document backend."""

import threading
from collections.abc import Iterator

from record_spine.storage.base import DocumentBackend


class InMemoryDocumentBackend(DocumentBackend):
    """
    Process-local document backend.

    Documents are kept as immutable ``bytes`` keyed by namespace, so callers
    can never reach into stored state. Used for tests and for embedding the
    store without touching disk.
    """

    def __init__(self):
        self._documents: dict[str, dict[str, bytes]] = {}
        self._lock = threading.Lock()

    def write(self, namespace: str, key: str, content: bytes) -> None:
        with self._lock:
            self._documents.setdefault(namespace, {})[key] = bytes(content)

    def read(self, namespace: str, key: str) -> bytes | None:
        with self._lock:
            return self._documents.get(namespace, {}).get(key)

    def exists(self, namespace: str, key: str) -> bool:
        with self._lock:
            return key in self._documents.get(namespace, {})

    def delete(self, namespace: str, key: str) -> bool:
        with self._lock:
            return self._documents.get(namespace, {}).pop(key, None) is not None

    def keys(self, namespace: str) -> Iterator[str]:
        with self._lock:
            snapshot = sorted(self._documents.get(namespace, {}))
        yield from snapshot
