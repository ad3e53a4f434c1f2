"""Tests for generic keyed CRUD, exercised through the person store."""

from datetime import date
from uuid import uuid4

import pytest

from record_spine.core.errors import (
    BatchWriteError,
    CorruptRecordError,
    RecordNotFoundError,
    WriteFailureError,
)
from record_spine.records.people import PersonStore
from record_spine.storage.memory import InMemoryDocumentBackend


class FlakyBackend(InMemoryDocumentBackend):
    """Fails the Nth write (1-based) with an OSError."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.writes = 0

    def write(self, namespace, key, content):
        self.writes += 1
        if self.writes == self.fail_on:
            raise OSError("simulated disk failure")
        super().write(namespace, key, content)


class TestCreateAndFind:
    def test_create_assigns_id_and_round_trips(self, stores, make_person):
        person = make_person()
        person_id = stores.people.create(person)

        found = stores.people.find(person_id)
        assert found is not None
        assert found.id == person_id
        assert found.model_dump(exclude={"id"}) == person.model_dump(exclude={"id"})

    def test_create_does_not_mutate_input(self, stores, make_person):
        person = make_person()
        stores.people.create(person)
        assert person.id is None

    def test_ids_are_unique(self, stores, make_person):
        ids = {stores.people.create(make_person()) for _ in range(20)}
        assert len(ids) == 20

    def test_create_starts_with_no_addresses(self, stores, make_person):
        person = make_person()
        person.address_ids = [uuid4()]
        person_id = stores.people.create(person)
        assert stores.people.find(person_id).address_ids == []

    def test_find_missing_returns_none(self, stores):
        assert stores.people.find(uuid4()) is None

    def test_find_accepts_string_id(self, stores, make_person):
        person_id = stores.people.create(make_person())
        assert stores.people.find(str(person_id)).id == person_id

    def test_find_returns_copies(self, stores, make_person):
        person_id = stores.people.create(make_person())
        first = stores.people.find(person_id)
        first.name = "Changed"
        assert stores.people.find(person_id).name == "Ada"

    def test_find_corrupt_raises(self, stores, make_person):
        person_id = stores.people.create(make_person())
        stores.people.backend.write("people", str(person_id), b"{broken")
        with pytest.raises(CorruptRecordError) as excinfo:
            stores.people.find(person_id)
        assert excinfo.value.context.record_id == str(person_id)

    def test_find_document_under_foreign_key_is_corrupt(self, stores, make_person):
        a = stores.people.create(make_person(name="A"))
        b = stores.people.create(make_person(name="B"))
        stores.people.backend.write("people", str(a), stores.people.backend.read("people", str(b)))

        with pytest.raises(CorruptRecordError) as excinfo:
            stores.people.find(a)
        assert excinfo.value.context.record_id == str(a)
        assert excinfo.value.context.metadata["stored_id"] == str(b)
        assert stores.people.find(b).name == "B"

    def test_find_malformed_id_returns_none(self, stores):
        assert stores.people.find("not-a-uuid") is None
        assert stores.people.exists("not-a-uuid") is False


class TestCreateMany:
    def test_creates_in_order(self, stores, make_person):
        ids = stores.people.create_many([make_person(name=n) for n in ("A", "B", "C")])
        assert [stores.people.find(i).name for i in ids] == ["A", "B", "C"]

    def test_partial_failure_reports_created_ids(self, make_person):
        people = PersonStore(FlakyBackend(fail_on=3))
        with pytest.raises(BatchWriteError) as excinfo:
            people.create_many([make_person(name=n) for n in ("A", "B", "C", "D")])

        error = excinfo.value
        assert len(error.created_ids) == 2
        assert isinstance(error.cause, WriteFailureError)
        # earlier creations stay persisted, nothing after the failure was written
        assert [people.find(i).name for i in error.created_ids] == ["A", "B"]
        assert len(people.ids()) == 2


class TestFindMany:
    def test_skips_missing_and_keeps_input_order(self, stores, make_person):
        a = stores.people.create(make_person(name="A"))
        b = stores.people.create(make_person(name="B"))
        found = stores.people.find_many([b, uuid4(), a])
        assert [p.name for p in found] == ["B", "A"]

    def test_empty(self, stores):
        assert stores.people.find_many([]) == []

    def test_corrupt_entry_skipped_and_counted(self, stores, make_person):
        a = stores.people.create(make_person(name="A"))
        b = stores.people.create(make_person(name="B"))
        stores.people.backend.write("people", str(a), b"garbage")

        found = stores.people.find_many([a, b])
        assert [p.name for p in found] == ["B"]
        assert stores.people.corrupt_skipped == 1

    def test_malformed_ids_skipped(self, stores, make_person):
        person_id = stores.people.create(make_person())
        found = stores.people.find_many(["not-a-uuid", person_id, ""])
        assert [p.id for p in found] == [person_id]

    def test_mismatched_document_skipped_and_counted(self, stores, make_person):
        a = stores.people.create(make_person(name="A"))
        b = stores.people.create(make_person(name="B"))
        stores.people.backend.write("people", str(a), stores.people.backend.read("people", str(b)))

        found = stores.people.find_many([a, b])
        assert [p.id for p in found] == [b]
        assert stores.people.corrupt_skipped == 1


class TestOverwrite:
    def test_replaces_fields(self, stores, make_person):
        person_id = stores.people.create(make_person())
        updated = stores.people.find(person_id)
        updated.surname = "King"
        stores.people.overwrite(updated)
        assert stores.people.find(person_id).surname == "King"

    def test_missing_raises_not_found(self, stores, make_person):
        person = make_person()
        person.id = uuid4()
        with pytest.raises(RecordNotFoundError):
            stores.people.overwrite(person)
        assert stores.people.find(person.id) is None

    def test_without_id_rejected(self, stores, make_person):
        with pytest.raises(ValueError):
            stores.people.overwrite(make_person())

    def test_keeps_stored_address_ids(self, stores, make_person, make_address):
        person_id = stores.people.create(make_person())
        address_id = stores.addresses.add_address(make_address(person_id))

        stale = stores.people.find(person_id)
        stale.address_ids = []
        stale.name = "Augusta"
        stores.people.overwrite(stale)

        person = stores.people.find(person_id)
        assert person.name == "Augusta"
        assert person.address_ids == [address_id]

    def test_write_failure_keeps_prior_value(self, make_person):
        backend = FlakyBackend(fail_on=2)
        people = PersonStore(backend)
        person_id = people.create(make_person())
        person = people.find(person_id)
        person.name = "Changed"
        with pytest.raises(WriteFailureError):
            people.overwrite(person)
        assert people.find(person_id).name == "Ada"


class TestDelete:
    def test_delete_then_find_absent(self, stores, make_person):
        person_id = stores.people.create(make_person())
        stores.people.delete(person_id)
        assert stores.people.find(person_id) is None

    def test_second_delete_is_noop(self, stores, make_person):
        person_id = stores.people.create(make_person())
        stores.people.delete(person_id)
        stores.people.delete(person_id)
        stores.people.delete(uuid4())

    def test_malformed_id_is_noop(self, stores, make_person):
        person_id = stores.people.create(make_person())
        stores.people.delete("not-a-uuid")
        assert stores.people.ids() == [person_id]


class TestReverseReference:
    def test_append_is_ordered_and_deduplicated(self, stores, make_person):
        person_id = stores.people.create(make_person())
        a1, a2 = uuid4(), uuid4()
        stores.people.append_address(person_id, a1)
        stores.people.append_address(person_id, a2)
        stores.people.append_address(person_id, a1)
        assert stores.people.find(person_id).address_ids == [a1, a2]

    def test_remove_by_value_and_noop_when_absent(self, stores, make_person):
        person_id = stores.people.create(make_person())
        a1, a2 = uuid4(), uuid4()
        stores.people.append_address(person_id, a1)
        stores.people.append_address(person_id, a2)
        stores.people.remove_address(person_id, a1)
        stores.people.remove_address(person_id, uuid4())
        assert stores.people.find(person_id).address_ids == [a2]

    def test_missing_person_raises(self, stores):
        with pytest.raises(RecordNotFoundError):
            stores.people.append_address(uuid4(), uuid4())
        with pytest.raises(RecordNotFoundError):
            stores.people.remove_address(uuid4(), uuid4())


class TestIds:
    def test_lists_created_records(self, stores, make_person):
        ids = stores.people.create_many([make_person(), make_person()])
        assert sorted(stores.people.ids()) == sorted(ids)

    def test_foreign_keys_ignored(self, stores, make_person):
        person_id = stores.people.create(make_person())
        stores.people.backend.write("people", "readme", b"x")
        assert stores.people.ids() == [person_id]


def test_birthday_preserved_exactly(stores):
    from record_spine.records.models import Person

    person_id = stores.people.create(Person(name="Grace", surname="Hopper", birthday=date(1906, 12, 9)))
    assert stores.people.find(person_id).birthday == date(1906, 12, 9)
