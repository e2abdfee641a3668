"""Default (non-S3) resolver port interface."""

from typing import Protocol


class DefaultResolverPort(Protocol):
    """Port for resolving paths that do not use the s3 schema."""

    def resolve(self, path: str) -> str:
        """Resolve path to a local file, or return an empty string."""
        ...

    def is_relative_path(self, path: str) -> bool:
        ...

    def get_modification_timestamp(self, path: str, resolved_path: str) -> float:
        ...
