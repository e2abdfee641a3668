"""Core domain for s3resolver."""

from .cache_table import CacheTable
from .config import ResolverConfig
from .engine import ResolutionEngine
from .errors import (
    CacheWriteError,
    MalformedPathError,
    ResolverWarning,
    S3ResolverError,
    ScopeError,
    UnresolvedFetchWarning,
)
from .models import INVALID_TIME, CacheEntry, CacheEntryInfo, CacheState
from .paths import S3Path, matches_schema, parse
from .scoped_cache import ScopedResolveCache, ScopeHandle

__all__ = [
    "INVALID_TIME",
    "CacheEntry",
    "CacheEntryInfo",
    "CacheState",
    "CacheTable",
    "CacheWriteError",
    "MalformedPathError",
    "ResolutionEngine",
    "ResolverConfig",
    "ResolverWarning",
    "S3Path",
    "S3ResolverError",
    "ScopeError",
    "ScopeHandle",
    "ScopedResolveCache",
    "UnresolvedFetchWarning",
    "matches_schema",
    "parse",
]
