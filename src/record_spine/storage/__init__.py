"""Document backends and per-key locking for the record stores."""

from record_spine.storage.base import DocumentBackend
from record_spine.storage.local import LocalDocumentBackend
from record_spine.storage.locks import KeyedLock
from record_spine.storage.memory import InMemoryDocumentBackend

__all__ = [
    "DocumentBackend",
    "LocalDocumentBackend",
    "InMemoryDocumentBackend",
    "KeyedLock",
    "get_backend",
]


def get_backend(settings=None) -> DocumentBackend:
    """Build a backend from configuration."""
    from record_spine.core.errors import ConfigError
    from record_spine.core.settings import get_settings

    settings = settings or get_settings()

    if settings.backend == "memory":
        return InMemoryDocumentBackend()
    if settings.backend == "local":
        return LocalDocumentBackend(base_path=settings.data_dir, fsync=settings.fsync)
    raise ConfigError("backend", settings.backend)
