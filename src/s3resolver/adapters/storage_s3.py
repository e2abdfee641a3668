"""S3 storage adapter using boto3."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..ports.storage import FetchStatus, ObjectContent, ObjectHead

if TYPE_CHECKING:
    from ..core.config import ResolverConfig


def _describe(error: ClientError) -> str:
    details = error.response.get("Error", {})
    return f"{details.get('Code', 'Unknown')} {details.get('Message', str(error))}"


def _is_not_modified(error: ClientError) -> bool:
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    code = error.response.get("Error", {}).get("Code")
    return status == 304 or code in ("304", "NotModified")


class S3StoreAdapter:
    """boto3 implementation of RemoteStorePort."""

    def __init__(
        self,
        client: Any | None = None,
        endpoint_url: str | None = None,
        region: str | None = None,
        proxy_url: str | None = None,
        timeout: float = 3.0,
    ):
        if client is None:
            proxies = {"http": proxy_url, "https": proxy_url} if proxy_url else None
            client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region,
                config=Config(
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    proxies=proxies,
                    # Path style works with MinIO and other S3 compatible endpoints
                    s3={"addressing_style": "path"},
                ),
            )
        self.client = client

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "S3StoreAdapter":
        return cls(
            endpoint_url=config.endpoint_url,
            region=config.region,
            proxy_url=config.proxy_url,
            timeout=config.timeout,
        )

    @staticmethod
    def _params(bucket: str, key: str, version_id: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {"Bucket": bucket, "Key": key}
        if version_id:
            params["VersionId"] = version_id
        return params

    def head_metadata(self, bucket: str, key: str, version_id: str | None = None) -> ObjectHead:
        try:
            response = self.client.head_object(**self._params(bucket, key, version_id))
        except ClientError as e:
            return ObjectHead(exists=False, error=_describe(e))
        except BotoCoreError as e:
            return ObjectHead(exists=False, error=str(e))

        return ObjectHead(
            exists=True,
            last_modified=response["LastModified"].timestamp(),
            content_tag=response.get("ETag", ""),
        )

    def get_content(
        self,
        bucket: str,
        key: str,
        version_id: str | None = None,
        if_modified_since: float | None = None,
    ) -> ObjectContent:
        params = self._params(bucket, key, version_id)
        if if_modified_since is not None:
            params["IfModifiedSince"] = datetime.fromtimestamp(if_modified_since, tz=UTC)

        try:
            response = self.client.get_object(**params)
        except ClientError as e:
            if _is_not_modified(e):
                return ObjectContent(status=FetchStatus.NOT_MODIFIED)
            return ObjectContent(status=FetchStatus.ERROR, error=_describe(e))
        except BotoCoreError as e:
            return ObjectContent(status=FetchStatus.ERROR, error=str(e))

        return ObjectContent(
            status=FetchStatus.SUCCESS,
            body=response["Body"],
            last_modified=response["LastModified"].timestamp(),
            content_tag=response.get("ETag", ""),
        )
