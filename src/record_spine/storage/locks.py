"""
Per-identifier lock registry.

``KeyedLock`` hands out one re-entrant lock per key so that operations on the
same record serialise while operations on unrelated records proceed in
parallel. Entries are reference counted and dropped once no thread holds or
waits on them, so the registry does not grow with the number of records ever
touched.

Examples:
    >>> locks = KeyedLock()
    >>> with locks.hold("person-1"):
    ...     ...  # read-modify-write person-1
    >>> locks.active_keys()
    0
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _Entry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


class KeyedLock:
    """Registry of re-entrant locks keyed by record identifier."""

    def __init__(self):
        self._entries: dict[Hashable, _Entry] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._entries)
