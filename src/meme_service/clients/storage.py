import asyncio
import logging
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from dishka import Provider, Scope

from meme_service.config import AwsConfig
from meme_service.errors import StorageError

logger = logging.getLogger(__name__)


class ObjectStorage(Protocol):
    """The operations the upload workflow needs from object storage."""

    async def put(
        self, key: str, data: bytes, content_type: str, public: bool = True
    ) -> None: ...

    async def delete(self, key: str) -> None: ...


class S3Storage:
    """S3-compatible bucket, addressed path-style (``{endpoint}/{bucket}/{key}``).

    boto3 clients are thread-safe, so one instance serves every request; the
    blocking calls run in worker threads.
    """

    def __init__(self, config: AwsConfig) -> None:
        self._bucket = config.bucket_name
        self._client = boto3.client(
            "s3",
            endpoint_url=config.service_url,
            region_name=config.region,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            config=Config(s3={"addressing_style": "path"}),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    async def put(
        self, key: str, data: bytes, content_type: str, public: bool = True
    ) -> None:
        params = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if public:
            params["ACL"] = "public-read"

        try:
            await asyncio.to_thread(self._client.put_object, **params)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to store {key} in {self._bucket}") from exc

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(
            self._client.delete_object, Bucket=self._bucket, Key=key
        )


storage_provider = Provider(scope=Scope.APP)
storage_provider.provide(S3Storage, provides=ObjectStorage)
