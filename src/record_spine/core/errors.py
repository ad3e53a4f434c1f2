"""
Structured error types for record-spine.

Every failure the store surfaces to a caller is a ``RecordStoreError``
subclass carrying a category, structured context and (when wrapping a
lower-level exception) the original cause. Serving layers map categories to
their own outcomes (e.g. NOT_FOUND → 404, VALIDATION → 400).

Manifesto:
    - **Typed hierarchy:** One error type per failure the store can report
    - **Rich context:** Errors carry kind/record_id/owner_id for logging
    - **Error chaining:** Original exceptions are preserved as ``cause``
    - **Absence is not an error:** ``find``-style reads return ``None``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      RecordStoreError                         │
        │            (category, context, cause, to_dict())              │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  RecordNotFoundError   UnknownOwnerError   CorruptRecordError │
        │  (NOT_FOUND)           (VALIDATION)        (PARSE)            │
        │                                                               │
        │  WriteFailureError     BatchWriteError     ConfigError        │
        │  (STORAGE)             (cause's category,  (CONFIG)           │
        │                         created_ids)                          │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = RecordNotFoundError("people", "7c0e...")
    >>> error.category
    <ErrorCategory.NOT_FOUND: 'NOT_FOUND'>
    >>> error.context.kind
    'people'

    Chaining an OS failure:

    >>> try:
    ...     raise OSError("disk full")
    ... except OSError as e:
    ...     error = WriteFailureError("write failed", cause=e)
    >>> error.cause
    OSError('disk full')

Guardrails:
    ❌ DON'T: Raise RecordNotFoundError from find/find_many/find_addresses
    ✅ DO: Return None or an empty list for absence

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    NOT_FOUND = "NOT_FOUND"       # Target record does not exist
    VALIDATION = "VALIDATION"     # Request references something invalid
    PARSE = "PARSE"               # Stored document fails to decode
    STORAGE = "STORAGE"           # Persistence medium rejected a write
    CONFIG = "CONFIG"             # Invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a record-store error.

    Attributes:
        kind: Entity namespace (``people``, ``addresses``)
        record_id: Identifier of the record the operation targeted
        owner_id: Owning person id for address operations
        key: Backend key/path involved in a storage failure
        metadata: Additional key-value pairs
    """

    kind: str | None = None
    record_id: str | None = None
    owner_id: str | None = None
    key: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["kind", "record_id", "owner_id", "key"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class RecordStoreError(Exception):
    """
    Base exception for all record-store errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``with_context()`` adds metadata fluently and ``to_dict()``
    serialises the error for structured logging.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RecordStoreError:
        """
        Add context to this error (fluent API).

        Usage:
            raise WriteFailureError("Failed").with_context(
                kind="people", key="people/1234.json"
            )
        """
        for key, value in kwargs.items():
            if isinstance(value, UUID):
                value = str(value)
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# LOOKUP ERRORS
# =============================================================================


class RecordNotFoundError(RecordStoreError):
    """The operation requires an existing record and none was found."""

    default_category = ErrorCategory.NOT_FOUND

    def __init__(self, kind: str, record_id: UUID | str, message: str | None = None):
        self.kind = kind
        self.record_id = str(record_id)
        super().__init__(
            message or f"No {kind} record with id {record_id}",
            context=ErrorContext(kind=kind, record_id=self.record_id),
        )


class UnknownOwnerError(RecordStoreError):
    """An address references a person that does not exist."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, owner_id: UUID | str, message: str | None = None):
        self.owner_id = str(owner_id)
        super().__init__(
            message or f"Address owner {owner_id} does not exist",
            context=ErrorContext(kind="addresses", owner_id=self.owner_id),
        )


# =============================================================================
# DATA / STORAGE ERRORS
# =============================================================================


class CorruptRecordError(RecordStoreError):
    """A stored document could not be decoded into its entity."""

    default_category = ErrorCategory.PARSE


class WriteFailureError(RecordStoreError):
    """The persistence medium rejected or failed a write."""

    default_category = ErrorCategory.STORAGE


class BatchWriteError(RecordStoreError):
    """
    A non-atomic batch failed partway.

    Records created before the failure stay persisted; their ids are
    available in ``created_ids`` so the caller can decide what to do. The
    category follows the failing item's error (e.g. VALIDATION for an
    unknown owner) and defaults to STORAGE.
    """

    default_category = ErrorCategory.STORAGE

    def __init__(
        self,
        message: str,
        *,
        created_ids: list[UUID],
        cause: BaseException,
        **kwargs: Any,
    ):
        if isinstance(cause, RecordStoreError):
            kwargs.setdefault("category", cause.category)
        super().__init__(message, cause=cause, **kwargs)
        self.created_ids = list(created_ids)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["created_ids"] = [str(i) for i in self.created_ids]
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(RecordStoreError):
    """Configuration value is invalid."""

    default_category = ErrorCategory.CONFIG

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "RecordStoreError",
    "RecordNotFoundError",
    "UnknownOwnerError",
    "CorruptRecordError",
    "WriteFailureError",
    "BatchWriteError",
    "ConfigError",
]
