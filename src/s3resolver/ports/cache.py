"""Local cache port interface."""

from pathlib import Path
from typing import BinaryIO, Protocol


class CachePort(Protocol):
    """Port for the on-disk object cache."""

    def object_path(self, bucket: str, key: str) -> Path:
        """Get path where an object should be cached."""
        ...

    def modification_time(self, path: Path) -> float | None:
        """Modification time of a cached file, or None if it does not exist."""
        ...

    def write_object(self, path: Path, body: BinaryIO, last_modified: float | None) -> Path:
        """Store object content at path, replacing any previous copy."""
        ...
