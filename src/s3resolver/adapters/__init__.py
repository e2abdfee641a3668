"""Adapters for s3resolver ports."""

from .cache_fs import FsCacheAdapter
from .clock_utc import UtcClockAdapter
from .logger_std import StdLoggerAdapter
from .metrics import LoggingMetricsAdapter, NoopMetricsAdapter
from .resolver_fs import FilesystemResolverAdapter
from .storage_s3 import S3StoreAdapter

__all__ = [
    "FilesystemResolverAdapter",
    "FsCacheAdapter",
    "LoggingMetricsAdapter",
    "NoopMetricsAdapter",
    "S3StoreAdapter",
    "StdLoggerAdapter",
    "UtcClockAdapter",
]
