"""Port interfaces for s3resolver."""

from .cache import CachePort
from .clock import ClockPort
from .logger import LoggerPort
from .metrics import MetricsPort
from .resolver import DefaultResolverPort
from .storage import FetchStatus, ObjectContent, ObjectHead, RemoteStorePort

__all__ = [
    "CachePort",
    "ClockPort",
    "DefaultResolverPort",
    "FetchStatus",
    "LoggerPort",
    "MetricsPort",
    "ObjectContent",
    "ObjectHead",
    "RemoteStorePort",
]
