"""Core exceptions and warnings for s3resolver."""


class S3ResolverError(Exception):
    """Base exception for s3resolver errors."""

    pass


class MalformedPathError(S3ResolverError, ValueError):
    """Identifier has no bucket/key separator, or an empty bucket or key."""

    def __init__(self, path: str, reason: str = "missing '/' after bucket"):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed S3 path {path!r}: {reason}")


class CacheWriteError(S3ResolverError):
    """Local cache directory or file could not be written."""

    pass


class ScopeError(S3ResolverError):
    """Resolve scope was ended out of order or more than once."""

    pass


class ResolverWarning(UserWarning):
    """Base warning for unexpected but recoverable resolver conditions."""

    pass


class UnresolvedFetchWarning(ResolverWarning):
    """An asset was fetched without being resolved first."""

    pass
