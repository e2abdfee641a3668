"""Core ResolutionEngine orchestration."""

import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..ports import (
    CachePort,
    ClockPort,
    DefaultResolverPort,
    LoggerPort,
    MetricsPort,
    RemoteStorePort,
)
from ..ports.storage import FetchStatus
from .cache_table import CacheTable
from .errors import CacheWriteError, MalformedPathError, UnresolvedFetchWarning
from .models import INVALID_TIME, CacheEntry, CacheEntryInfo, CacheState
from .paths import S3_PREFIX, S3Path, matches_schema, parse
from .scoped_cache import ScopedResolveCache, ScopeHandle


class ResolutionEngine:
    """Resolve s3 identifiers to locally cached files.

    Each normalized S3 path owns one :class:`CacheEntry` which moves through
    ``NEEDS_FETCHING -> MISSING (fetch in flight) -> FETCHED``. Resolving only
    updates bookkeeping; content is downloaded by :meth:`fetch_asset`, so the
    caller decides when to pay for the transfer.

    Nothing raises across the public methods: network and filesystem errors end
    up as entry state transitions, empty paths, ``False`` or ``INVALID_TIME``.
    """

    def __init__(
        self,
        store: RemoteStorePort | None,
        cache: CachePort,
        default_resolver: DefaultResolverPort,
        clock: ClockPort,
        logger: LoggerPort,
        metrics: MetricsPort,
        table: CacheTable | None = None,
        scopes: ScopedResolveCache | None = None,
    ):
        """Initialize engine with ports.

        Args:
            store: Object store adapter. None means no store is available and
                every s3 operation reports failure without network access.
            table: Cache table to use. A fresh one is created if not given.
            scopes: Scoped resolve cache. A fresh one is created if not given.
        """
        self.store = store
        self.cache = cache
        self.default_resolver = default_resolver
        self.clock = clock
        self.logger = logger
        self.metrics = metrics
        self.table = table if table is not None else CacheTable()
        self.scopes = scopes if scopes is not None else ScopedResolveCache()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def matches_schema(self, path: str) -> bool:
        return matches_schema(path)

    def resolve(self, path: str, scope: ScopeHandle | None = None) -> str:
        """Resolve any asset path.

        Non-s3 paths go to the default resolver. Inside an open scope (or with
        an explicit ``scope`` handle) each distinct path is resolved only once.
        """
        if not path:
            return path
        return self.scopes.resolve_within_scope(path, self._resolve_uncached, scope)

    def _resolve_uncached(self, path: str) -> str:
        if not self.matches_schema(path):
            return self.default_resolver.resolve(path)
        return self.resolve_name(path)

    def resolve_name(self, path: str) -> str:
        """Resolve an s3 identifier against the cache table.

        Returns the local cache path when the entry is known, the logical
        ``s3://<local path>`` when it has not been fetched, or an empty string
        when the identifier cannot be resolved at all.
        """
        s3_path = self._parse(path)
        if s3_path is None:
            return ""
        if self.store is None:
            self.logger.warning("No S3 store configured", path=path)
            return ""

        try:
            local_path = str(self.cache.object_path(s3_path.bucket, s3_path.key))
        except MalformedPathError as e:
            self.logger.warning("Cannot map S3 path into the cache", path=path, reason=e.reason)
            return ""

        entry, created = self.table.get_or_create(
            s3_path.normalized,
            lambda: CacheEntry(local_path=local_path, is_pinned=s3_path.is_versioned),
        )
        if created:
            self.logger.debug("Registered S3 asset", path=s3_path.url, local_path=local_path)
            return self._logical_path(entry.local_path)

        with entry.lock:
            state = entry.state
            is_pinned = entry.is_pinned

        if state is CacheState.FETCHED:
            if not is_pinned:
                self._check_object(s3_path, entry)
            return entry.local_path

        if state is CacheState.NEEDS_FETCHING:
            return entry.local_path

        # MISSING: the last fetch failed. Re-arm it so the caller can retry.
        with entry.lock:
            if entry.state is CacheState.MISSING and not entry.in_flight:
                entry.state = CacheState.NEEDS_FETCHING
        return self._logical_path(entry.local_path)

    def _check_object(self, s3_path: S3Path, entry: CacheEntry) -> None:
        """HEAD the object and mark the entry for fetching if it changed remotely."""
        head = self.store.head_metadata(s3_path.bucket, s3_path.key, s3_path.version_id)  # type: ignore[union-attr]
        self.metrics.increment("s3resolver.head")

        if not head.exists or head.last_modified is None:
            with entry.lock:
                entry.last_modified = INVALID_TIME
            self.logger.warning(
                "HEAD request failed",
                path=s3_path.url,
                error=head.error or "object not found",
            )
            return

        with entry.lock:
            if entry.state is CacheState.FETCHED and head.last_modified > entry.last_modified:
                entry.state = CacheState.NEEDS_FETCHING
                self.logger.debug(
                    "Remote object changed",
                    path=s3_path.url,
                    cached=entry.last_modified,
                    remote=head.last_modified,
                )
            entry.last_modified = head.last_modified

    def is_relative_path(self, path: str) -> bool:
        return not self.matches_schema(path) and self.default_resolver.is_relative_path(path)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch_asset(self, path: str, destination: str = "") -> bool:
        """Download a resolved s3 asset into its cache path.

        The asset must have been resolved first. Only a NEEDS_FETCHING entry
        contacts the store; any other state reports success right away, and a
        MISSING entry has to be resolved again before it is downloaded.
        """
        if not self.matches_schema(path):
            # Local files need no fetching
            return True

        s3_path = self._parse(path)
        if s3_path is None:
            return False
        if self.store is None:
            self.logger.warning("No S3 store configured", path=path)
            return False

        entry = self.table.get(s3_path.normalized)
        if entry is None:
            warnings.warn(
                f"{s3_path.url} was not resolved before fetching",
                UnresolvedFetchWarning,
                stacklevel=2,
            )
            self.logger.warning("Asset was not resolved before fetching", path=s3_path.url)
            return False

        with entry.fetch_lock:
            with entry.lock:
                state = entry.state
                if state is CacheState.NEEDS_FETCHING:
                    # Untrusted until the download completes
                    entry.state = CacheState.MISSING
                    entry.in_flight = True

            if state is not CacheState.NEEDS_FETCHING:
                if state is CacheState.MISSING:
                    self.logger.warning("Asset is missing, resolve it again to retry", path=s3_path.url)
                return True

            try:
                return self._fetch_object(s3_path, entry, destination)
            finally:
                with entry.lock:
                    entry.in_flight = False

    def _fetch_object(self, s3_path: S3Path, entry: CacheEntry, destination: str) -> bool:
        """Conditionally GET the object and store it at the entry's local path."""
        start_time = self.clock.now()
        local_path = Path(entry.local_path)

        if destination and destination not in (entry.local_path, self._logical_path(entry.local_path)):
            self.logger.debug(
                "Fetch destination differs from cache path",
                destination=destination,
                local_path=entry.local_path,
            )

        # Only download when there is no local copy or it is outdated
        if_modified_since = self.cache.modification_time(local_path)
        if if_modified_since is not None:
            with entry.lock:
                entry.last_modified = if_modified_since

        self.logger.info("Fetching S3 object", path=s3_path.url, local_path=entry.local_path)
        result = self.store.get_content(  # type: ignore[union-attr]
            s3_path.bucket,
            s3_path.key,
            s3_path.version_id,
            if_modified_since=if_modified_since,
        )
        self.metrics.increment("s3resolver.fetch")

        if result.status is FetchStatus.NOT_MODIFIED:
            with entry.lock:
                entry.state = CacheState.FETCHED
            self.metrics.increment("s3resolver.fetch.not_modified")
            self._log_fetch(s3_path, start_time, cache_hit=True)
            return True

        if result.status is not FetchStatus.SUCCESS or result.body is None:
            self.metrics.increment("s3resolver.fetch.failed")
            self.logger.warning("GET request failed", path=s3_path.url, error=result.error)
            return False

        try:
            self.cache.write_object(local_path, result.body, result.last_modified)
        except CacheWriteError as e:
            self.metrics.increment("s3resolver.fetch.failed")
            self.logger.error(f"Could not cache {s3_path.url}: {e}")
            return False
        finally:
            close = getattr(result.body, "close", None)
            if close is not None:
                close()

        with entry.lock:
            if result.last_modified is not None:
                entry.last_modified = result.last_modified
            entry.content_tag = result.content_tag
            entry.state = CacheState.FETCHED

        self._log_fetch(s3_path, start_time, cache_hit=False)
        return True

    def _log_fetch(self, s3_path: S3Path, start_time, cache_hit: bool) -> None:
        duration = (self.clock.now() - start_time).total_seconds()
        self.logger.log_operation(
            op="fetch",
            key=s3_path.url,
            durations={"total": duration},
            cache_hit=cache_hit,
        )
        self.metrics.timing("s3resolver.fetch.duration", duration)

    # ------------------------------------------------------------------
    # Timestamps and bookkeeping
    # ------------------------------------------------------------------

    def get_timestamp(self, path: str) -> float:
        """Last modification time of a fetched or pending asset.

        Returns ``INVALID_TIME`` (and logs a warning) for assets without a
        known timestamp. The sentinel is not a real time.
        """
        s3_path = self._parse(path)
        if s3_path is None:
            return INVALID_TIME
        if self.store is None:
            return INVALID_TIME

        entry = self.table.get(s3_path.normalized)
        info = entry.snapshot() if entry is not None else None
        if info is None or info.state is CacheState.MISSING or info.last_modified == INVALID_TIME:
            self.logger.warning("Asset is missing when querying timestamps", path=s3_path.url)
            return INVALID_TIME
        return info.last_modified

    def get_modification_timestamp(self, path: str, resolved_path: str) -> float:
        if self.matches_schema(path):
            return self.get_timestamp(path)
        return self.default_resolver.get_modification_timestamp(path, resolved_path)

    def update_asset_info(self, path: str) -> None:
        # Entries are updated during resolve and fetch; nothing to do here yet.
        if self.matches_schema(path):
            self.logger.debug("update_asset_info is a no-op", path=path)

    def refresh(self, prefix: str = "") -> None:
        """Invalidate cached entries.

        Every refresh clears the whole table; ``prefix`` is accepted for
        prefix-scoped invalidation but currently ignored.
        """
        count = len(self.table)
        self.table.clear()
        self.logger.info("Cache table cleared", prefix=prefix, entries=count)

    def entry_info(self, path: str) -> CacheEntryInfo | None:
        """Snapshot of the cache entry for ``path``, if there is one."""
        try:
            s3_path = parse(path)
        except MalformedPathError:
            return None
        entry = self.table.get(s3_path.normalized)
        return entry.snapshot() if entry is not None else None

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def begin_scope(self) -> ScopeHandle:
        return self.scopes.begin_scope()

    def end_scope(self, handle: ScopeHandle) -> None:
        self.scopes.end_scope(handle)

    @contextmanager
    def scope(self) -> Iterator[ScopeHandle]:
        """Open a resolve scope that is always closed on exit."""
        with self.scopes.scope() as handle:
            yield handle

    # ------------------------------------------------------------------

    def _parse(self, path: str) -> S3Path | None:
        try:
            return parse(path)
        except MalformedPathError as e:
            self.logger.warning("Cannot resolve malformed S3 path", path=path, reason=e.reason)
            return None

    @staticmethod
    def _logical_path(local_path: str) -> str:
        return f"{S3_PREFIX}{local_path}"
