"""Person/address record stores and their wiring."""

from dataclasses import dataclass

from record_spine.records.addresses import AddressStore
from record_spine.records.codec import RecordCodec
from record_spine.records.integrity import IntegrityReport, scan_integrity
from record_spine.records.models import Address, Person, Record
from record_spine.records.people import PersonStore
from record_spine.records.store import RecordStore

__all__ = [
    "Address",
    "AddressStore",
    "IntegrityReport",
    "Person",
    "PersonStore",
    "Record",
    "RecordCodec",
    "RecordStore",
    "RecordStores",
    "open_stores",
    "scan_integrity",
]


@dataclass
class RecordStores:
    """The person and address stores sharing one backend."""

    people: PersonStore
    addresses: AddressStore

    def check_integrity(self) -> IntegrityReport:
        return scan_integrity(self.people, self.addresses)


def open_stores(settings=None, backend=None) -> RecordStores:
    """Build both stores from configuration (or on an explicit backend)."""
    from record_spine.storage import get_backend

    backend = backend or get_backend(settings)
    people = PersonStore(backend)
    return RecordStores(people=people, addresses=AddressStore(backend, people))
