"""Local filesystem document backend."""

import os
import re
import tempfile
from collections.abc import Iterator
from pathlib import Path

from record_spine.core.logging import get_logger
from record_spine.storage.base import DocumentBackend

logger = get_logger(__name__)

_SUFFIX = ".json"
_TMP_PREFIX = "."
_SAFE_NAME = re.compile(r"[A-Za-z0-9_-]+")


class LocalDocumentBackend(DocumentBackend):
    """
    Local filesystem document backend.

    Stores each document as ``<base_path>/<namespace>/<key>.json``. Writes go
    to a temporary file in the same directory which is then renamed over the
    target with ``os.replace``, so readers never observe a half-written
    document.
    """

    def __init__(self, base_path: str | Path = "./data", fsync: bool = True):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.fsync = fsync
        logger.info("local_backend_initialized", base_path=str(self.base_path), fsync=fsync)

    def _resolve_path(self, namespace: str, key: str) -> Path:
        """Resolve a namespace/key pair to an absolute filesystem path."""
        # Keys and namespaces are single path segments; this also keeps
        # every document inside base_path.
        for part in (namespace, key):
            if not _SAFE_NAME.fullmatch(part):
                raise ValueError(f"Invalid document name: {part!r}")
        return self.base_path / namespace / f"{key}{_SUFFIX}"

    def write(self, namespace: str, key: str, content: bytes) -> None:
        """Write a document atomically."""
        full_path = self._resolve_path(namespace, key)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=str(full_path.parent),
            prefix=f"{_TMP_PREFIX}{full_path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as tmp_handle:
                tmp_handle.write(content)
                tmp_handle.flush()
                if self.fsync:
                    os.fsync(tmp_handle.fileno())
            os.replace(tmp_path, full_path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

        logger.debug("document_written", namespace=namespace, key=key, size=len(content))

    def read(self, namespace: str, key: str) -> bytes | None:
        """Read a document from the local filesystem."""
        full_path = self._resolve_path(namespace, key)
        try:
            return full_path.read_bytes()
        except FileNotFoundError:
            return None

    def exists(self, namespace: str, key: str) -> bool:
        """Check if a document exists."""
        return self._resolve_path(namespace, key).is_file()

    def delete(self, namespace: str, key: str) -> bool:
        """Delete a document."""
        full_path = self._resolve_path(namespace, key)
        try:
            full_path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("document_deleted", namespace=namespace, key=key)
        return True

    def keys(self, namespace: str) -> Iterator[str]:
        """List document keys in a namespace, skipping in-flight temp files."""
        if not _SAFE_NAME.fullmatch(namespace):
            raise ValueError(f"Invalid document name: {namespace!r}")
        search_dir = self.base_path / namespace
        if not search_dir.is_dir():
            return

        for file_path in sorted(search_dir.glob(f"*{_SUFFIX}")):
            if file_path.name.startswith(_TMP_PREFIX) or not file_path.is_file():
                continue
            yield file_path.name[: -len(_SUFFIX)]
