"""Core primitives shared by the storage and record layers: errors, logging, settings."""

from record_spine.core.errors import (
    BatchWriteError,
    ConfigError,
    CorruptRecordError,
    ErrorCategory,
    ErrorContext,
    RecordNotFoundError,
    RecordStoreError,
    UnknownOwnerError,
    WriteFailureError,
)
from record_spine.core.logging import LogContext, configure_logging, get_logger
from record_spine.core.settings import RecordStoreSettings, get_settings, reset_settings

__all__ = [
    "BatchWriteError",
    "ConfigError",
    "CorruptRecordError",
    "ErrorCategory",
    "ErrorContext",
    "RecordNotFoundError",
    "RecordStoreError",
    "UnknownOwnerError",
    "WriteFailureError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "RecordStoreSettings",
    "get_settings",
    "reset_settings",
]
