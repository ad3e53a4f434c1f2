"""
record-spine: an embedded JSON document store for people and their addresses.

Quick start::

    from datetime import date
    from record_spine import Address, Person, open_stores

    stores = open_stores()
    ada = stores.people.create(Person(name="Ada", surname="Lovelace", birthday=date(1815, 12, 10)))
    home = stores.addresses.add_address(Address(street_name="Main St", house_number=10, person_id=ada))
    stores.addresses.find_addresses(ada)   # [Address(id=home, ...)]
"""

from record_spine.core.errors import (
    BatchWriteError,
    CorruptRecordError,
    RecordNotFoundError,
    RecordStoreError,
    UnknownOwnerError,
    WriteFailureError,
)
from record_spine.records import (
    Address,
    AddressStore,
    Person,
    PersonStore,
    RecordStores,
    open_stores,
)

__version__ = "0.1.0"

__all__ = [
    "Address",
    "AddressStore",
    "BatchWriteError",
    "CorruptRecordError",
    "Person",
    "PersonStore",
    "RecordNotFoundError",
    "RecordStoreError",
    "RecordStores",
    "UnknownOwnerError",
    "WriteFailureError",
    "open_stores",
]
