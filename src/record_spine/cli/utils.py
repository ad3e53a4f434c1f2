"""
CLI utility helpers: console handles and store construction.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from record_spine.core.logging import configure_logging
from record_spine.core.settings import get_settings
from record_spine.records import RecordStores, open_stores

console = Console()
err_console = Console(stderr=True)


def open_from_options(data_dir: str | None = None) -> RecordStores:
    """Open the stores from settings, with ``--data-dir`` taking precedence."""
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": Path(data_dir), "backend": "local"})
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")
    return open_stores(settings)
