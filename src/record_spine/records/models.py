"""Entity models persisted by the record stores."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """Base for every stored entity: an optional id assigned by the store on create."""

    # Unknown fields are ignored so documents written by a newer version
    # (with extra optional fields) still decode.
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    id: UUID | None = None


class Person(Record):
    """A person and the ordered ids of the addresses they own."""

    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    birthday: date
    address_ids: list[UUID] = Field(default_factory=list)

    @field_validator("address_ids")
    @classmethod
    def _no_duplicate_addresses(cls, value: list[UUID]) -> list[UUID]:
        if len(set(value)) != len(value):
            raise ValueError("address_ids must not contain duplicates")
        return value


class Address(Record):
    """A postal address owned by exactly one person."""

    street_name: str = Field(min_length=1)
    house_number: int
    apartment_number: str | None = Field(default=None, min_length=1, max_length=1)
    person_id: UUID
