"""Shared fixtures for s3resolver tests."""

import io
import threading
from pathlib import Path

import pytest

from s3resolver.adapters import (
    FilesystemResolverAdapter,
    FsCacheAdapter,
    NoopMetricsAdapter,
    StdLoggerAdapter,
    UtcClockAdapter,
)
from s3resolver.core import ResolutionEngine
from s3resolver.ports.storage import FetchStatus, ObjectContent, ObjectHead

DEFAULT_MODIFIED = 1_700_000_000.0


class FakeStore:
    """In-memory RemoteStorePort that counts requests."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str, str | None], tuple[bytes, float, str]] = {}
        self.head_calls = 0
        self.get_calls = 0
        self.fail_head = False
        self.fail_get = False
        self.last_if_modified_since: float | None = None
        self._lock = threading.Lock()

    def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        last_modified: float = DEFAULT_MODIFIED,
        version_id: str | None = None,
    ) -> None:
        etag = f'"etag-{len(body)}-{int(last_modified)}"'
        self.objects[(bucket, key, version_id)] = (body, last_modified, etag)

    def head_metadata(self, bucket: str, key: str, version_id: str | None = None) -> ObjectHead:
        with self._lock:
            self.head_calls += 1
        if self.fail_head:
            return ObjectHead(exists=False, error="RequestTimeout Connection timed out")
        obj = self.objects.get((bucket, key, version_id))
        if obj is None:
            return ObjectHead(exists=False, error="404 Not Found")
        return ObjectHead(exists=True, last_modified=obj[1], content_tag=obj[2])

    def get_content(
        self,
        bucket: str,
        key: str,
        version_id: str | None = None,
        if_modified_since: float | None = None,
    ) -> ObjectContent:
        with self._lock:
            self.get_calls += 1
            self.last_if_modified_since = if_modified_since
        if self.fail_get:
            return ObjectContent(status=FetchStatus.ERROR, error="InternalError Boom")
        obj = self.objects.get((bucket, key, version_id))
        if obj is None:
            return ObjectContent(status=FetchStatus.ERROR, error="NoSuchKey Not found")
        body, last_modified, etag = obj
        if if_modified_since is not None and last_modified <= if_modified_since:
            return ObjectContent(status=FetchStatus.NOT_MODIFIED)
        return ObjectContent(
            status=FetchStatus.SUCCESS,
            body=io.BytesIO(body),
            last_modified=last_modified,
            content_tag=etag,
        )


def build_engine(store: FakeStore | None, cache_dir: Path, search_paths=()) -> ResolutionEngine:
    return ResolutionEngine(
        store=store,
        cache=FsCacheAdapter(cache_dir),
        default_resolver=FilesystemResolverAdapter(search_paths),
        clock=UtcClockAdapter(),
        logger=StdLoggerAdapter(level="INFO"),
        metrics=NoopMetricsAdapter(),
    )


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def store() -> FakeStore:
    fake = FakeStore()
    fake.put("bucket1", "scene.usd", b"#usda 1.0\n")
    fake.put("bucket1", "dir/obj.usd", b"#usda 1.0\ndef Xform \"root\" {}\n")
    fake.put("bucket1", "dir/obj.usd", b"#usda 1.0\n# pinned v1\n", version_id="v1")
    return fake


@pytest.fixture
def engine(store: FakeStore, cache_dir: Path) -> ResolutionEngine:
    return build_engine(store, cache_dir)


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fake credentials so boto3 never touches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def make_engine(cache_dir: Path):
    """Factory for engines with a custom store or search paths."""

    def _make(store: FakeStore | None, search_paths=()) -> ResolutionEngine:
        return build_engine(store, cache_dir, search_paths)

    return _make
