"""Engine construction with default adapters."""

from collections.abc import Iterable
from pathlib import Path

from botocore.exceptions import BotoCoreError

from .adapters import (
    FilesystemResolverAdapter,
    FsCacheAdapter,
    LoggingMetricsAdapter,
    NoopMetricsAdapter,
    S3StoreAdapter,
    StdLoggerAdapter,
    UtcClockAdapter,
)
from .core import ResolutionEngine, ResolverConfig
from .ports import RemoteStorePort


def create_engine(
    config: ResolverConfig | None = None,
    *,
    store: RemoteStorePort | None = None,
    search_paths: Iterable[Path | str] = (),
) -> ResolutionEngine:
    """Create an engine wired with the filesystem and boto3 adapters.

    Args:
        config: Configuration. Read from the environment when omitted.
        store: Store adapter to use instead of a boto3 client built from config.
        search_paths: Directories for resolving relative non-S3 paths.
    """
    if config is None:
        config = ResolverConfig.from_env()

    logger = StdLoggerAdapter(level=config.log_level)
    if config.metrics_type == "logging":
        metrics = LoggingMetricsAdapter(logger)
    else:
        metrics = NoopMetricsAdapter()

    if store is None:
        try:
            store = S3StoreAdapter.from_config(config)
        except (BotoCoreError, ValueError) as e:
            # Engine still works for local paths; s3 paths report failure
            logger.error(f"Could not create S3 client: {e}")
            store = None

    return ResolutionEngine(
        store=store,
        cache=FsCacheAdapter(config.cache_path),
        default_resolver=FilesystemResolverAdapter(search_paths),
        clock=UtcClockAdapter(),
        logger=logger,
        metrics=metrics,
    )
