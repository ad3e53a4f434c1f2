"""
Referential integrity scan over the person and address stores.

Walks both namespaces and reports every place where ``Person.address_ids``
and ``Address.person_id`` disagree. The scan reads record by record without
a global lock, so run it against a quiescent store for an exact answer.

Findings:
    dangling  : person lists an address that is missing or owned by someone else
    unlinked  : address whose owner exists but does not list it
    orphans   : address whose owner no longer exists (tolerated; person
                deletion does not cascade)
    corrupt   : documents that failed to decode
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from record_spine.core.errors import CorruptRecordError
from record_spine.core.logging import get_logger
from record_spine.records.addresses import AddressStore
from record_spine.records.models import Address, Person
from record_spine.records.people import PersonStore

logger = get_logger(__name__)


@dataclass
class IntegrityReport:
    """Result of ``scan_integrity``."""

    people_scanned: int = 0
    addresses_scanned: int = 0
    dangling: list[tuple[UUID, UUID]] = field(default_factory=list)
    unlinked: list[UUID] = field(default_factory=list)
    orphans: list[UUID] = field(default_factory=list)
    corrupt: list[tuple[str, UUID]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no reference is broken in either direction (orphans allowed)."""
        return not (self.dangling or self.unlinked or self.corrupt)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "people_scanned": self.people_scanned,
            "addresses_scanned": self.addresses_scanned,
            "dangling": [
                {"person_id": str(p), "address_id": str(a)} for p, a in self.dangling
            ],
            "unlinked": [str(a) for a in self.unlinked],
            "orphans": [str(a) for a in self.orphans],
            "corrupt": [{"kind": k, "record_id": str(i)} for k, i in self.corrupt],
        }


def scan_integrity(people: PersonStore, addresses: AddressStore) -> IntegrityReport:
    """Check both directions of the person/address reference."""
    report = IntegrityReport()

    persons: dict[UUID, Person] = {}
    for person_id in people.ids():
        try:
            person = people.find(person_id)
        except CorruptRecordError:
            report.corrupt.append((people.kind, person_id))
            continue
        if person is not None:
            persons[person_id] = person
    report.people_scanned = len(persons)

    stored: dict[UUID, Address] = {}
    for address_id in addresses.ids():
        try:
            address = addresses.find(address_id)
        except CorruptRecordError:
            report.corrupt.append((addresses.kind, address_id))
            continue
        if address is not None:
            stored[address_id] = address
    report.addresses_scanned = len(stored)

    for person_id, person in persons.items():
        for address_id in person.address_ids:
            address = stored.get(address_id)
            if address is None or address.person_id != person_id:
                report.dangling.append((person_id, address_id))

    for address_id, address in stored.items():
        owner = persons.get(address.person_id)
        if owner is None:
            report.orphans.append(address_id)
        elif address_id not in owner.address_ids:
            report.unlinked.append(address_id)

    logger.info(
        "integrity_scanned",
        ok=report.ok,
        people=report.people_scanned,
        addresses=report.addresses_scanned,
        dangling=len(report.dangling),
        unlinked=len(report.unlinked),
        orphans=len(report.orphans),
        corrupt=len(report.corrupt),
    )
    return report
