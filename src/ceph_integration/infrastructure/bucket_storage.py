"""MinIO implementation of the BucketStorage interface."""

import logging
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from ceph_integration.config import BatchPolicy
from ceph_integration.infrastructure.guard import StorageGuard
from ceph_integration.infrastructure.interfaces import BucketStorage
from ceph_integration.infrastructure.operations import (
    DEFAULT_CONTENT_TYPE,
    delete_keys,
    list_keys,
    resolve_length,
    stat_metadata,
    unique_keys,
)
from ceph_integration.models import ObjectMetadata, StreamedObject, user_metadata_headers
from ceph_integration.tracing import traced

logger = logging.getLogger(__name__)


class MinioBucketStorage(BucketStorage):
    """File storage in a single configured bucket, returning live streams on read."""

    def __init__(
        self,
        guard: StorageGuard,
        bucket_name: str,
        batch_policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING,
    ):
        self._guard = guard
        self._client = guard.client
        self._bucket_name = bucket_name
        self._batch_policy = batch_policy

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    @traced("bucket.put")
    def put(
        self,
        key: str,
        content_type: str | None,
        user_metadata: Mapping[str, str] | None,
        data: BinaryIO,
        content_length: int | None = None,
    ) -> ObjectMetadata:
        logger.info("Putting file", extra={"bucket_name": self._bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(self._bucket_name)

        def upload() -> None:
            length, part_size = resolve_length(data, content_length)
            self._client.put_object(
                bucket_name=self._bucket_name,
                object_name=key,
                data=data,
                length=length,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                metadata=user_metadata_headers(user_metadata),
                part_size=part_size,
            )

        self._guard.execute_runnable(upload)
        metadata = stat_metadata(self._guard, self._bucket_name, key)
        logger.info("File stored", extra={"bucket_name": self._bucket_name, "object_name": key})
        return metadata

    @traced("bucket.get")
    def get(self, key: str) -> StreamedObject | None:
        logger.info("Getting file", extra={"bucket_name": self._bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(self._bucket_name)

        if not self._guard.object_exists(self._bucket_name, key):
            logger.info(
                "File not found", extra={"bucket_name": self._bucket_name, "object_name": key}
            )
            return None

        def open_stream() -> StreamedObject:
            response = self._client.get_object(self._bucket_name, key)
            try:
                metadata = ObjectMetadata.from_headers(response.headers)
            except Exception:
                response.close()
                response.release_conn()
                raise
            return StreamedObject(key, response, metadata)

        result = self._guard.execute(open_stream)
        logger.info("File found", extra={"bucket_name": self._bucket_name, "object_name": key})
        return result

    @traced("bucket.get_metadata")
    def get_metadata(self, keys: Iterable[str]) -> list[ObjectMetadata] | None:
        keys = unique_keys(keys)
        logger.info(
            "Getting files metadata", extra={"bucket_name": self._bucket_name, "keys": keys}
        )
        self._guard.assert_bucket_exists(self._bucket_name)

        existence = self._guard.existence(self._bucket_name, keys)
        missing = [key for key, exists in existence.items() if not exists]
        if missing and self._batch_policy is BatchPolicy.ALL_OR_NOTHING:
            logger.info(
                "Some files not found",
                extra={"bucket_name": self._bucket_name, "missing": missing},
            )
            return None

        return [
            stat_metadata(self._guard, self._bucket_name, key) for key in keys if existence[key]
        ]

    @traced("bucket.delete")
    def delete(self, keys: Iterable[str]) -> None:
        keys = unique_keys(keys)
        logger.info("Deleting files", extra={"bucket_name": self._bucket_name, "keys": keys})
        self._guard.assert_bucket_exists(self._bucket_name)
        if keys:
            delete_keys(self._guard, self._bucket_name, keys)

    @traced("bucket.exist")
    def exist(self, keys: Iterable[str]) -> bool:
        keys = unique_keys(keys)
        self._guard.assert_bucket_exists(self._bucket_name)
        result = all(self._guard.existence(self._bucket_name, keys).values())
        logger.info(
            "Objects existence checked",
            extra={"bucket_name": self._bucket_name, "keys": keys, "exists": result},
        )
        return result

    @traced("bucket.get_keys")
    def get_keys(self, prefix: str) -> list[str]:
        self._guard.assert_bucket_exists(self._bucket_name)
        return sorted(list_keys(self._guard, self._bucket_name, prefix))
