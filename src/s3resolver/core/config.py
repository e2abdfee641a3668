"""Centralized configuration for s3resolver."""

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class ResolverConfig:
    """All s3resolver configuration in one place.

    Environment variables (all optional):
        USD_S3_CACHE_PATH:  Root of the local object cache. Default "/tmp".
        USD_S3_ENDPOINT:    Endpoint override, e.g. a MinIO or ActiveScale node.
        USD_S3_PROXY_HOST:  HTTP proxy host. Unset means no proxy.
        USD_S3_PROXY_PORT:  HTTP proxy port. Default 80.
        USD_S3_LOG_LEVEL:   Logging level. Default "INFO".
        USD_S3_METRICS:     Metrics backend: "noop" (default) or "logging".
        USD_S3_TIMEOUT:     Connect and read timeout in seconds. Default 3.0.
        AWS_DEFAULT_REGION: Region passed to the S3 client.
    """

    cache_path: Path = Path("/tmp")
    log_level: str = "INFO"
    metrics_type: str = "noop"
    timeout: float = 3.0

    endpoint_url: str | None = field(default=None, repr=False)
    proxy_host: str | None = None
    proxy_port: int = 80
    region: str | None = None

    @property
    def proxy_url(self) -> str | None:
        if not self.proxy_host:
            return None
        host = self.proxy_host if "://" in self.proxy_host else f"http://{self.proxy_host}"
        return f"{host}:{self.proxy_port}"

    @classmethod
    def from_env(cls, *, log_level: str = "INFO") -> "ResolverConfig":
        """Build config from environment variables + explicit overrides."""
        return cls(
            cache_path=Path(os.environ.get("USD_S3_CACHE_PATH") or "/tmp"),
            log_level=os.environ.get("USD_S3_LOG_LEVEL", log_level),
            metrics_type=os.environ.get("USD_S3_METRICS", "noop"),
            timeout=float(os.environ.get("USD_S3_TIMEOUT", "3.0")),
            endpoint_url=os.environ.get("USD_S3_ENDPOINT") or None,
            proxy_host=os.environ.get("USD_S3_PROXY_HOST") or None,
            proxy_port=int(os.environ.get("USD_S3_PROXY_PORT") or "80"),
            region=os.environ.get("AWS_DEFAULT_REGION") or None,
        )
