"""Settings for record-spine, loaded from ``RECORDS_*`` environment variables.

Fields
──────
data_dir     : Root directory for the local backend (one sub-directory per kind)
backend      : ``local`` (JSON files) or ``memory`` (process-local, for tests)
fsync        : Flush documents to disk before the atomic rename
log_level    : Structlog log level (default WARNING)
log_format   : ``json`` or ``console``
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordStoreSettings(BaseSettings):
    """Record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "data",
        description="Root directory holding the people/ and addresses/ documents",
    )
    backend: str = "local"
    fsync: bool = True

    # ── Observability ────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "console"] = "console"


_settings: RecordStoreSettings | None = None


def get_settings() -> RecordStoreSettings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = RecordStoreSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
