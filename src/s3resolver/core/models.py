"""Core domain models."""

import sys
import threading
from dataclasses import dataclass, field
from enum import Enum

# Sentinel for an unknown or failed timestamp. Never a real modification time.
INVALID_TIME = -sys.float_info.max


class CacheState(Enum):
    """Lifecycle state of a cached S3 object."""

    MISSING = "missing"
    NEEDS_FETCHING = "needs_fetching"
    FETCHED = "fetched"


@dataclass
class CacheEntry:
    """Mutable cache record for one normalized S3 path.

    Fields are only read or written while holding ``lock``. ``fetch_lock`` is
    held for the whole duration of a download so that concurrent fetchers of
    the same object wait for each other instead of downloading twice.
    """

    local_path: str
    state: CacheState = CacheState.NEEDS_FETCHING
    last_modified: float = INVALID_TIME
    is_pinned: bool = False
    content_tag: str = ""
    in_flight: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)
    fetch_lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def snapshot(self) -> "CacheEntryInfo":
        with self.lock:
            return CacheEntryInfo(
                local_path=self.local_path,
                state=self.state,
                last_modified=self.last_modified,
                is_pinned=self.is_pinned,
                content_tag=self.content_tag,
            )


@dataclass(frozen=True, slots=True)
class CacheEntryInfo:
    """Read-only view of a cache entry."""

    local_path: str
    state: CacheState
    last_modified: float
    is_pinned: bool
    content_tag: str

    def to_dict(self) -> dict[str, object]:
        return {
            "local_path": self.local_path,
            "state": self.state.value,
            "last_modified": self.last_modified if self.last_modified != INVALID_TIME else None,
            "is_pinned": self.is_pinned,
            "content_tag": self.content_tag,
        }
