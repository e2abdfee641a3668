"""Parsing of s3:// identifiers.

Accepted forms are ``s3://bucket/key``, ``s3:/bucket/key`` and
``s3:bucket/key``. A trailing ``?versionId=<id>`` pins the identifier to one
object version::

    >>> parse("s3://bucket/dir/obj.usd?versionId=v1")
    S3Path(bucket='bucket', key='dir/obj.usd', version_id='v1')
"""

from dataclasses import dataclass

from .errors import MalformedPathError

S3_PREFIX = "s3://"
S3_PREFIX_SINGLE = "s3:/"
S3_PREFIX_SHORT = "s3:"
VERSION_MARKER = "versionId="


@dataclass(frozen=True, slots=True)
class S3Path:
    """Bucket, key and optional version of an S3 object."""

    bucket: str
    key: str
    version_id: str | None = None

    @property
    def is_versioned(self) -> bool:
        return self.version_id is not None

    @property
    def normalized(self) -> str:
        """Cache table key: ``bucket/key`` plus the version query if pinned."""
        path = f"{self.bucket}/{self.key}"
        if self.version_id is not None:
            path = f"{path}?{VERSION_MARKER}{self.version_id}"
        return path

    @property
    def url(self) -> str:
        return f"{S3_PREFIX}{self.normalized}"


def matches_schema(path: str) -> bool:
    """Return True if ``path`` uses the s3 schema in any accepted form."""
    return path.startswith(S3_PREFIX_SHORT)


def strip_schema(path: str) -> str:
    """Strip the schema prefix and any redundant leading separators."""
    return path[len(S3_PREFIX_SHORT) :].lstrip("/")


def parse(identifier: str) -> S3Path:
    """Parse an s3 identifier into bucket, key and version.

    Raises:
        MalformedPathError: If there is no ``/`` after the bucket, or the
            bucket or key is empty.
    """
    stripped = strip_schema(identifier) if matches_schema(identifier) else identifier

    bucket, sep, remainder = stripped.partition("/")
    if not sep:
        raise MalformedPathError(identifier)
    if not bucket:
        raise MalformedPathError(identifier, "empty bucket name")

    key, _, query = remainder.partition("?")
    if not key:
        raise MalformedPathError(identifier, "empty object key")

    version_id = None
    if VERSION_MARKER in stripped:
        # versionId may appear anywhere in the query, other parameters are ignored
        version_id = stripped.split(VERSION_MARKER, 1)[1].split("&", 1)[0]

    return S3Path(bucket=bucket, key=key, version_id=version_id)
