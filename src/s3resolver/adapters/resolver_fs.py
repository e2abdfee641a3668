"""Filesystem resolver adapter for non-S3 paths."""

import os
from collections.abc import Iterable
from pathlib import Path

from ..core.models import INVALID_TIME


class FilesystemResolverAdapter:
    """Resolve plain filesystem paths.

    Absolute paths resolve to themselves when they exist. Relative paths are
    tried against the working directory, then against each search path in
    order. Unresolvable paths resolve to an empty string.
    """

    def __init__(self, search_paths: Iterable[Path | str] = ()):
        self.search_paths = [Path(p) for p in search_paths]

    def resolve(self, path: str) -> str:
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return os.path.normpath(candidate) if candidate.exists() else ""

        for base in [Path.cwd(), *self.search_paths]:
            anchored = base / candidate
            if anchored.exists():
                return os.path.normpath(anchored.absolute())
        return ""

    def is_relative_path(self, path: str) -> bool:
        return bool(path) and not os.path.isabs(os.path.expanduser(path))

    def get_modification_timestamp(self, path: str, resolved_path: str) -> float:
        try:
            return os.path.getmtime(resolved_path or path)
        except OSError:
            return INVALID_TIME
