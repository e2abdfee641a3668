"""Remote object store port interface."""

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Protocol


class FetchStatus(Enum):
    SUCCESS = "success"
    NOT_MODIFIED = "not_modified"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Result of a metadata (HEAD) request."""

    exists: bool
    last_modified: float | None = None
    content_tag: str = ""
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectContent:
    """Result of a content (GET) request."""

    status: FetchStatus
    body: BinaryIO | None = None
    last_modified: float | None = None
    content_tag: str = ""
    error: str | None = None


class RemoteStorePort(Protocol):
    """Port for object store operations.

    Implementations report failures through the returned result objects rather
    than raising.
    """

    def head_metadata(self, bucket: str, key: str, version_id: str | None = None) -> ObjectHead:
        """Check existence and last modification time of an object."""
        ...

    def get_content(
        self,
        bucket: str,
        key: str,
        version_id: str | None = None,
        if_modified_since: float | None = None,
    ) -> ObjectContent:
        """Download an object, conditionally on it being newer than if_modified_since."""
        ...
