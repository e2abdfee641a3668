"""Process-wide table of cache entries keyed by normalized S3 path."""

import threading
from collections.abc import Callable

from .models import CacheEntry, CacheEntryInfo


class CacheTable:
    """Thread-safe mapping from normalized path to :class:`CacheEntry`.

    The table lock only protects the mapping itself. Entry fields are guarded by
    each entry's own lock, so a slow operation on one entry never blocks lookups
    of another.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def get_or_create(
        self, key: str, factory: Callable[[], CacheEntry]
    ) -> tuple[CacheEntry, bool]:
        """Return the entry for ``key``, creating it with ``factory`` if absent.

        Insert-if-absent is atomic: concurrent callers for the same key all get
        the same entry and exactly one of them sees ``created=True``.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                return entry, False
            entry = factory()
            self._entries[key] = entry
            return entry, True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict[str, CacheEntryInfo]:
        with self._lock:
            entries = list(self._entries.items())
        return {key: entry.snapshot() for key, entry in entries}

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
