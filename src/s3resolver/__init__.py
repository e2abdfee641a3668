"""s3resolver - resolve s3:// asset identifiers to locally cached files."""

try:
    from ._version import version as __version__
except ImportError:
    # Package is not installed, so version is not available
    __version__ = "0.0.0+unknown"

from .client import create_engine
from .core import (
    INVALID_TIME,
    CacheEntryInfo,
    CacheState,
    ResolutionEngine,
    ResolverConfig,
    S3Path,
    matches_schema,
    parse,
)

__all__ = [
    "INVALID_TIME",
    "CacheEntryInfo",
    "CacheState",
    "ResolutionEngine",
    "ResolverConfig",
    "S3Path",
    "__version__",
    "create_engine",
    "matches_schema",
    "parse",
]
