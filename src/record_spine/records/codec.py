"""JSON codec turning entity models into stored documents and back."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import ValidationError

from record_spine.core.errors import CorruptRecordError
from record_spine.records.models import Record

M = TypeVar("M", bound=Record)


class RecordCodec(Generic[M]):
    """
    Field-named JSON codec for one entity model.

    Documents carry every field by name (absent optionals encode as
    ``null``), so ``decode(encode(x)) == x`` for every valid entity. A
    document that is not valid JSON, misses a required field or has no id
    raises ``CorruptRecordError``.
    """

    def __init__(self, model: type[M]):
        self.model = model

    def encode(self, entity: M) -> bytes:
        return entity.model_dump_json().encode("utf-8")

    def decode(self, document: bytes) -> M:
        try:
            entity = self.model.model_validate_json(document)
        except ValidationError as e:
            raise CorruptRecordError(
                f"Malformed {self.model.__name__} document: {e.error_count()} error(s)",
                cause=e,
            ) from e
        if entity.id is None:
            raise CorruptRecordError(f"{self.model.__name__} document has no id")
        return entity
