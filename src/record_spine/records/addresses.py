"""
Address store with person/address referential integrity.

Every address is owned by one person and listed in that person's
``address_ids``. The store keeps both sides in step:

- ``add_address`` writes the address and links it to its owner as one unit,
  rolling the document back if linking fails.
- ``delete_address`` detaches the address from its owner first and deletes
  the document second, so an interruption leaves at worst an unreferenced
  document, never a reference to a missing one.

Lock order for every cross-kind operation is owner lock, then address lock.
The new address id stays locked until it is linked (or rolled back), so a
concurrent ``find`` on it only ever returns a linked address or None.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from record_spine.core.errors import RecordNotFoundError, UnknownOwnerError
from record_spine.core.logging import get_logger
from record_spine.records.models import Address
from record_spine.records.people import PersonStore
from record_spine.records.store import RecordStore, parse_id
from record_spine.storage.base import DocumentBackend
from record_spine.storage.locks import KeyedLock

logger = get_logger(__name__)

ADDRESSES = "addresses"


class AddressStore(RecordStore[Address]):
    """Stores ``Address`` records and maintains ``Person.address_ids``."""

    def __init__(
        self,
        backend: DocumentBackend,
        people: PersonStore,
        *,
        locks: KeyedLock | None = None,
    ):
        super().__init__(backend, Address, ADDRESSES, locks=locks)
        self.people = people

    def add_address(self, address: Address) -> UUID:
        """
        Persist a new address and link it to its owner.

        If linking fails the address document is deleted again and the link
        error is raised. Should that delete fail too, the address stays
        persisted but unlinked; the failure is logged as
        ``address_rollback_failed`` and the integrity scan reports it as
        unlinked.

        Raises:
            UnknownOwnerError: ``address.person_id`` matches no person; nothing
                is written.
        """
        owner_id = address.person_id
        with self.people.locked(owner_id):
            if not self.people.exists(owner_id):
                logger.warning("address_owner_unknown", owner_id=str(owner_id))
                raise UnknownOwnerError(owner_id)

            record = self._new_record(address)
            with self.locked(record.id):
                self._write(record)
                try:
                    self.people.append_address(owner_id, record.id)
                except Exception:
                    self._roll_back(record.id)
                    raise

        logger.info("address_linked", address_id=str(record.id), owner_id=str(owner_id))
        return record.id

    def _roll_back(self, address_id: UUID) -> None:
        try:
            self._delete(address_id)
        except Exception:
            # The link failure is what the caller sees; this one is logged.
            logger.exception("address_rollback_failed", address_id=str(address_id))
            return
        logger.warning("address_rolled_back", address_id=str(address_id))

    def add_addresses(self, addresses: Iterable[Address]) -> list[UUID]:
        """Add each address in order; not atomic (see ``create_many``)."""
        return self.create_many(addresses)

    def find_addresses(self, person_id: UUID | str) -> list[Address]:
        """Addresses listed by the person, in link order; ``[]`` for an unknown person."""
        person = self.people.find(person_id)
        if person is None:
            return []
        return self.find_many(person.address_ids)

    def delete_address(self, address_id: UUID | str) -> None:
        """
        Detach an address from its owner, then delete it.

        Deleting an absent address is a no-op, and an owner that no longer
        exists is tolerated.
        """
        address_id = parse_id(address_id)
        if address_id is None:
            return
        address = self.find(address_id)
        if address is None:
            return

        owner_id = address.person_id
        with self.people.locked(owner_id), self.locked(address_id):
            # Re-read under both locks: a concurrent delete may have won.
            if self._read(address_id) is None:
                return
            try:
                self.people.remove_address(owner_id, address_id)
            except RecordNotFoundError:
                logger.info(
                    "address_owner_missing",
                    address_id=str(address_id),
                    owner_id=str(owner_id),
                )
            self._delete(address_id)

        logger.info("address_deleted", address_id=str(address_id), owner_id=str(owner_id))

    # -- Generic operations routed through the integrity rules -------------

    def create(self, entity: Address) -> UUID:
        return self.add_address(entity)

    def delete(self, record_id: UUID | str) -> None:
        self.delete_address(record_id)

    def overwrite(self, entity: Address) -> None:
        """Replace an existing address; its owner cannot change."""
        if entity.id is None:
            raise ValueError("Cannot overwrite an addresses record without an id")
        with self.locked(entity.id):
            current = self._require(entity.id)
            if current.person_id != entity.person_id:
                raise ValueError(
                    f"Address {entity.id} belongs to {current.person_id}; person_id is immutable"
                )
            super().overwrite(entity)
