"""Base document backend interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class DocumentBackend(ABC):
    """
    Abstract base class for document backends.

    A backend maps ``(namespace, key)`` pairs to opaque byte documents. Each
    entity kind gets its own namespace so keys only need to be unique within
    that kind. Backends know nothing about entities or locking; the record
    stores layer both on top.

    Contract:
        - ``write`` is atomic: a reader sees either the prior document or the
          new one, never a partial write.
        - A completed ``write`` is visible to every subsequent ``read``.
        - Failures raise ``OSError`` (or a subclass); the record store turns
          them into ``WriteFailureError``.
    """

    @abstractmethod
    def write(self, namespace: str, key: str, content: bytes) -> None:
        """
        Atomically store a document, replacing any previous one.

        Args:
            namespace: Entity namespace (e.g. "people")
            key: Document key within the namespace
            content: Serialized document
        """
        ...

    @abstractmethod
    def read(self, namespace: str, key: str) -> bytes | None:
        """
        Read a document.

        Returns:
            The document bytes, or None if no document exists
        """
        ...

    @abstractmethod
    def exists(self, namespace: str, key: str) -> bool:
        """Check if a document exists."""
        ...

    @abstractmethod
    def delete(self, namespace: str, key: str) -> bool:
        """
        Delete a document.

        Returns:
            True if deleted, False if it didn't exist
        """
        ...

    @abstractmethod
    def keys(self, namespace: str) -> Iterator[str]:
        """
        List document keys in a namespace.

        Yields:
            Each key currently stored in the namespace
        """
        ...
