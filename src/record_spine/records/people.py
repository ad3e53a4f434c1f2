"""Person store: generic CRUD plus the person → addresses reverse reference."""

from __future__ import annotations

from uuid import UUID

from record_spine.core.logging import get_logger
from record_spine.records.models import Person
from record_spine.records.store import RecordStore, as_uuid
from record_spine.storage.base import DocumentBackend
from record_spine.storage.locks import KeyedLock

logger = get_logger(__name__)

PEOPLE = "people"


class PersonStore(RecordStore[Person]):
    """
    Stores ``Person`` records under the ``people`` namespace.

    ``address_ids`` belongs to the address store: ``create`` always starts
    it empty, ``overwrite`` keeps the stored list, and only
    ``append_address``/``remove_address`` change it.
    """

    def __init__(self, backend: DocumentBackend, *, locks: KeyedLock | None = None):
        super().__init__(backend, Person, PEOPLE, locks=locks)

    def _new_record(self, entity: Person) -> Person:
        record = super()._new_record(entity)
        record.address_ids = []
        return record

    def overwrite(self, entity: Person) -> None:
        """Replace name/surname/birthday of an existing person."""
        if entity.id is None:
            raise ValueError("Cannot overwrite a people record without an id")
        with self.locked(entity.id):
            current = self._require(entity.id)
            self._write(entity.model_copy(update={"address_ids": list(current.address_ids)}))
        logger.info("record_overwritten", kind=self.kind, record_id=str(entity.id))

    def append_address(self, person_id: UUID | str, address_id: UUID | str) -> None:
        """Add ``address_id`` to the person's list unless already present."""
        person_id, address_id = as_uuid(person_id), as_uuid(address_id)
        with self.locked(person_id):
            person = self._require(person_id)
            if address_id in person.address_ids:
                return
            person.address_ids.append(address_id)
            self._write(person)
        logger.debug("address_appended", person_id=str(person_id), address_id=str(address_id))

    def remove_address(self, person_id: UUID | str, address_id: UUID | str) -> None:
        """Drop ``address_id`` from the person's list; no-op if it is not there."""
        person_id, address_id = as_uuid(person_id), as_uuid(address_id)
        with self.locked(person_id):
            person = self._require(person_id)
            if address_id not in person.address_ids:
                return
            person.address_ids.remove(address_id)
            self._write(person)
        logger.debug("address_removed", person_id=str(person_id), address_id=str(address_id))
