"""
Generic keyed record store.

``RecordStore`` persists one entity kind as individually addressable JSON
documents on a ``DocumentBackend``: one namespace per kind, one document per
record, keyed by the record's UUID.

Manifesto:
    - **Keyed CRUD:** create assigns the id; find/overwrite/delete by id
    - **Absence is a value:** find returns None, delete of a missing id is a no-op
    - **Atomic documents:** a failed write leaves either nothing or the prior value
    - **Per-id serialisation:** every operation on one id holds that id's lock;
      distinct ids never block each other

Architecture:
    ::

        caller ──► RecordStore[M] ──► RecordCodec[M] ──► bytes
                        │
                        ├── KeyedLock   (one RLock per record id)
                        └── DocumentBackend (namespace=kind, key=str(id))

Examples:
    >>> store = RecordStore(InMemoryDocumentBackend(), Person, kind="people")
    >>> person_id = store.create(Person(name="Ada", surname="Lovelace",
    ...                                 birthday=date(1815, 12, 10)))
    >>> store.find(person_id).name
    'Ada'
    >>> store.delete(person_id)
    >>> store.find(person_id) is None
    True

Guardrails:
    ❌ DON'T: Treat create_many as a transaction
    ✅ DO: Inspect BatchWriteError.created_ids after a partial failure
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from record_spine.core.errors import (
    BatchWriteError,
    CorruptRecordError,
    ErrorCategory,
    RecordNotFoundError,
    RecordStoreError,
    WriteFailureError,
)
from record_spine.core.logging import get_logger
from record_spine.records.codec import RecordCodec
from record_spine.records.models import Record
from record_spine.storage.base import DocumentBackend
from record_spine.storage.locks import KeyedLock

logger = get_logger(__name__)

M = TypeVar("M", bound=Record)


def as_uuid(value: UUID | str) -> UUID:
    """Normalise an id given as UUID or string."""
    return value if isinstance(value, UUID) else UUID(str(value))


def parse_id(value: UUID | str) -> UUID | None:
    """Like ``as_uuid``, but None for a string that is not a UUID."""
    try:
        return as_uuid(value)
    except ValueError:
        return None


class RecordStore(Generic[M]):
    """Keyed CRUD over one entity kind."""

    def __init__(
        self,
        backend: DocumentBackend,
        model: type[M],
        kind: str,
        *,
        locks: KeyedLock | None = None,
    ):
        self.backend = backend
        self.kind = kind
        self.codec: RecordCodec[M] = RecordCodec(model)
        self._locks = locks or KeyedLock()
        self._stats_lock = threading.Lock()
        self._corrupt_skipped = 0

    # -- Locking -----------------------------------------------------------

    @contextmanager
    def locked(self, record_id: UUID | str) -> Iterator[None]:
        """Hold the per-record lock so a read-modify-write sees no interleaving."""
        with self._locks.hold(as_uuid(record_id)):
            yield

    # -- Unlocked primitives (callers hold the record lock) ----------------

    def _read(self, record_id: UUID) -> M | None:
        try:
            raw = self.backend.read(self.kind, str(record_id))
        except OSError as e:
            raise RecordStoreError(
                f"Failed to read {self.kind} record {record_id}",
                category=ErrorCategory.STORAGE,
                cause=e,
            ).with_context(kind=self.kind, record_id=record_id) from e
        if raw is None:
            return None
        try:
            record = self.codec.decode(raw)
        except CorruptRecordError as e:
            e.with_context(kind=self.kind, record_id=record_id)
            raise
        if record.id != record_id:
            raise CorruptRecordError(
                f"{self.kind} document {record_id} carries id {record.id}"
            ).with_context(kind=self.kind, record_id=record_id, stored_id=record.id)
        return record

    def _require(self, record_id: UUID) -> M:
        record = self._read(record_id)
        if record is None:
            raise RecordNotFoundError(self.kind, record_id)
        return record

    def _write(self, record: M) -> None:
        content = self.codec.encode(record)
        try:
            self.backend.write(self.kind, str(record.id), content)
        except OSError as e:
            raise WriteFailureError(
                f"Failed to write {self.kind} record {record.id}", cause=e
            ).with_context(kind=self.kind, record_id=record.id) from e

    def _delete(self, record_id: UUID) -> bool:
        try:
            return self.backend.delete(self.kind, str(record_id))
        except OSError as e:
            raise WriteFailureError(
                f"Failed to delete {self.kind} record {record_id}", cause=e
            ).with_context(kind=self.kind, record_id=record_id) from e

    def _new_record(self, entity: M) -> M:
        """Copy ``entity`` with a fresh random id."""
        return entity.model_copy(update={"id": uuid4()}, deep=True)

    # -- Public operations -------------------------------------------------

    def create(self, entity: M) -> UUID:
        """Persist a new record and return its generated id."""
        record = self._new_record(entity)
        with self.locked(record.id):
            self._write(record)
        logger.info("record_created", kind=self.kind, record_id=str(record.id))
        return record.id

    def create_many(self, entities: Iterable[M]) -> list[UUID]:
        """
        Create each entity in order.

        Not atomic: if one create fails, the earlier ones stay persisted and
        a ``BatchWriteError`` carrying their ids is raised.
        """
        created: list[UUID] = []
        for index, entity in enumerate(entities):
            try:
                created.append(self.create(entity))
            except RecordStoreError as e:
                logger.warning(
                    "batch_create_failed",
                    kind=self.kind,
                    index=index,
                    created=len(created),
                    error=e.to_dict(),
                )
                raise BatchWriteError(
                    f"Batch create of {self.kind} failed at item {index}",
                    created_ids=created,
                    cause=e,
                ).with_context(kind=self.kind, index=index) from e
        return created

    def find(self, record_id: UUID | str) -> M | None:
        """Return the stored record, or None if it does not exist."""
        record_id = parse_id(record_id)
        if record_id is None:
            return None
        with self.locked(record_id):
            return self._read(record_id)

    def find_many(self, record_ids: Iterable[UUID | str]) -> list[M]:
        """
        Best-effort batch read.

        Returns the records that exist, in input order. Missing and
        malformed ids are skipped silently; corrupt documents are skipped,
        logged and counted in ``corrupt_skipped``.
        """
        found: list[M] = []
        for record_id in record_ids:
            try:
                record = self.find(record_id)
            except CorruptRecordError as e:
                with self._stats_lock:
                    self._corrupt_skipped += 1
                logger.warning("corrupt_record_skipped", **e.to_dict())
                continue
            if record is not None:
                found.append(record)
        return found

    def exists(self, record_id: UUID | str) -> bool:
        record_id = parse_id(record_id)
        if record_id is None:
            return False
        with self.locked(record_id):
            return self.backend.exists(self.kind, str(record_id))

    def overwrite(self, entity: M) -> None:
        """Replace an existing record; raises RecordNotFoundError if absent."""
        if entity.id is None:
            raise ValueError(f"Cannot overwrite a {self.kind} record without an id")
        with self.locked(entity.id):
            if not self.backend.exists(self.kind, str(entity.id)):
                raise RecordNotFoundError(self.kind, entity.id)
            self._write(entity)
        logger.info("record_overwritten", kind=self.kind, record_id=str(entity.id))

    def delete(self, record_id: UUID | str) -> None:
        """Remove a record; deleting an absent id is a no-op."""
        record_id = parse_id(record_id)
        if record_id is None:
            return
        with self.locked(record_id):
            deleted = self._delete(record_id)
        if deleted:
            logger.info("record_deleted", kind=self.kind, record_id=str(record_id))

    def ids(self) -> list[UUID]:
        """
        Scan the ids of every stored document of this kind.

        The listing is a snapshot of the backend and takes no record locks;
        use ``find`` on an id to get its settled value.
        """
        result = []
        for key in self.backend.keys(self.kind):
            try:
                result.append(UUID(key))
            except ValueError:
                logger.warning("foreign_document_ignored", kind=self.kind, key=key)
        return result

    @property
    def corrupt_skipped(self) -> int:
        """Number of corrupt documents skipped by ``find_many`` so far."""
        with self._stats_lock:
            return self._corrupt_skipped
