"""
Shared pytest fixtures for record-spine tests.

This module provides:
- Backends: in-memory and tmp-path local filesystem
- ``stores``: person + address stores, parametrised over both backends
- Sample entity builders

Usage:
    def test_something(stores, make_person):
        person_id = stores.people.create(make_person())
"""

import sys
from datetime import date
from pathlib import Path
from uuid import UUID

import pytest
import structlog

# Ensure record_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from record_spine.core.settings import reset_settings
from record_spine.records import Address, Person, RecordStores, open_stores
from record_spine.storage import InMemoryDocumentBackend, LocalDocumentBackend


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Isolate tests from RECORDS_* variables, cached settings and logging config."""
    for name in ("RECORDS_DATA_DIR", "RECORDS_BACKEND", "RECORDS_FSYNC", "RECORDS_LOG_LEVEL", "RECORDS_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
    structlog.reset_defaults()


@pytest.fixture
def memory_backend() -> InMemoryDocumentBackend:
    return InMemoryDocumentBackend()


@pytest.fixture
def local_backend(tmp_path: Path) -> LocalDocumentBackend:
    return LocalDocumentBackend(base_path=tmp_path / "data", fsync=False)


@pytest.fixture(params=["memory", "local"])
def stores(request, tmp_path: Path) -> RecordStores:
    """Person and address stores over each backend."""
    if request.param == "memory":
        backend = InMemoryDocumentBackend()
    else:
        backend = LocalDocumentBackend(base_path=tmp_path / "data", fsync=False)
    return open_stores(backend=backend)


@pytest.fixture
def make_person():
    def _make(name: str = "Ada", surname: str = "Lovelace", birthday: date = date(1815, 12, 10)) -> Person:
        return Person(name=name, surname=surname, birthday=birthday)

    return _make


@pytest.fixture
def make_address():
    def _make(
        person_id: UUID,
        street_name: str = "Main St",
        house_number: int = 10,
        apartment_number: str | None = None,
    ) -> Address:
        return Address(
            street_name=street_name,
            house_number=house_number,
            apartment_number=apartment_number,
            person_id=person_id,
        )

    return _make
