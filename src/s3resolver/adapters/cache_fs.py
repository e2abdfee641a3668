"""Filesystem cache adapter."""

import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from ..core.errors import CacheWriteError, MalformedPathError

CHUNK_SIZE = 8192


class FsCacheAdapter:
    """Filesystem implementation of CachePort.

    Objects are laid out as ``<base_dir>/<bucket>/<key>``. Writes go to a
    temporary file next to the target and are renamed into place, so a failed
    download never leaves a truncated file at the cache path.
    """

    def __init__(self, base_dir: Path | str):
        self.base_dir = Path(base_dir)

    def object_path(self, bucket: str, key: str) -> Path:
        base = os.path.normpath(self.base_dir)
        bucket_dir = os.path.normpath(os.path.join(base, bucket))
        path = os.path.normpath(os.path.join(bucket_dir, key))
        if (
            os.path.commonpath([base, bucket_dir]) != base
            or os.path.commonpath([bucket_dir, path]) != bucket_dir
            or path == bucket_dir
        ):
            raise MalformedPathError(f"{bucket}/{key}", "path escapes the cache directory")
        return Path(path)

    def modification_time(self, path: Path) -> float | None:
        try:
            return os.path.getmtime(path)
        except OSError:
            return None

    def write_object(self, path: Path, body: BinaryIO, last_modified: float | None) -> Path:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheWriteError(f"Cannot create cache directory {path.parent}: {e}") from e

        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=path.parent, prefix=f".{path.name}.", suffix=".part", delete=False
            ) as tmp:
                tmp_path = Path(tmp.name)
                for chunk in iter(lambda: body.read(CHUNK_SIZE), b""):
                    tmp.write(chunk)
            if last_modified is not None:
                # Lets If-Modified-Since requests use the remote timestamp
                os.utime(tmp_path, (last_modified, last_modified))
            os.replace(tmp_path, path)
        except Exception as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise CacheWriteError(f"Cannot write {path}: {e}") from e
        return path
