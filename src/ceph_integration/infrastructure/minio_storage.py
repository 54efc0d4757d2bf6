"""MinIO implementation of the CephService interface."""

import io
import logging
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from minio.commonconfig import REPLACE, CopySource

from ceph_integration.config import BatchPolicy
from ceph_integration.infrastructure.guard import StorageGuard
from ceph_integration.infrastructure.interfaces import CephService
from ceph_integration.infrastructure.operations import (
    DEFAULT_CONTENT_TYPE,
    delete_keys,
    list_keys,
    resolve_length,
    stat_metadata,
    unique_keys,
)
from ceph_integration.models import CephObject, ObjectMetadata, user_metadata_headers
from ceph_integration.tracing import traced

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain"


class MinioCephService(CephService):
    """Content storage on Ceph through the MinIO client."""

    def __init__(
        self,
        guard: StorageGuard,
        batch_policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING,
    ):
        self._guard = guard
        self._client = guard.client
        self._batch_policy = batch_policy

    @property
    def batch_policy(self) -> BatchPolicy:
        return self._batch_policy

    @traced("get")
    def get(self, bucket_name: str, key: str) -> CephObject | None:
        logger.info("Getting file", extra={"bucket_name": bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(bucket_name)

        if not self._guard.object_exists(bucket_name, key):
            logger.info("File not found", extra={"bucket_name": bucket_name, "object_name": key})
            return None

        def fetch() -> CephObject:
            response = self._client.get_object(bucket_name, key)
            try:
                return CephObject(
                    content=response.read(),
                    metadata=ObjectMetadata.from_headers(response.headers),
                )
            finally:
                response.close()
                response.release_conn()

        result = self._guard.execute(fetch)
        logger.info("File found", extra={"bucket_name": bucket_name, "object_name": key})
        return result

    @traced("get_as_string")
    def get_as_string(self, bucket_name: str, key: str) -> str | None:
        logger.info("Getting content", extra={"bucket_name": bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(bucket_name)

        if not self._guard.object_exists(bucket_name, key):
            logger.warning(
                "Content not found", extra={"bucket_name": bucket_name, "object_name": key}
            )
            return None

        def fetch() -> str:
            response = self._client.get_object(bucket_name, key)
            try:
                # Undecodable bytes become U+FFFD
                return response.data.decode("utf-8", errors="replace")
            finally:
                response.close()
                response.release_conn()

        result = self._guard.execute(fetch)
        logger.info("Content found", extra={"bucket_name": bucket_name, "object_name": key})
        return result

    @traced("put_content")
    def put_content(self, bucket_name: str, key: str, content: str) -> None:
        logger.info("Putting content", extra={"bucket_name": bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(bucket_name)

        payload = content.encode("utf-8")
        self._guard.execute_runnable(
            lambda: self._client.put_object(
                bucket_name=bucket_name,
                object_name=key,
                data=io.BytesIO(payload),
                length=len(payload),
                content_type=TEXT_CONTENT_TYPE,
            )
        )
        logger.info("Content stored", extra={"bucket_name": bucket_name, "object_name": key})

    @traced("put")
    def put(
        self,
        bucket_name: str,
        key: str,
        content_type: str | None,
        user_metadata: Mapping[str, str] | None,
        data: BinaryIO,
        content_length: int | None = None,
    ) -> ObjectMetadata:
        logger.info("Putting file", extra={"bucket_name": bucket_name, "object_name": key})
        self._guard.assert_bucket_exists(bucket_name)

        def upload() -> None:
            length, part_size = resolve_length(data, content_length)
            self._client.put_object(
                bucket_name=bucket_name,
                object_name=key,
                data=data,
                length=length,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                metadata=user_metadata_headers(user_metadata),
                part_size=part_size,
            )

        self._guard.execute_runnable(upload)
        # Report what the store persisted rather than what was requested
        metadata = stat_metadata(self._guard, bucket_name, key)
        logger.info(
            "File stored",
            extra={
                "bucket_name": bucket_name,
                "object_name": key,
                "size": metadata.content_length,
            },
        )
        return metadata

    @traced("put_object")
    def put_object(self, bucket_name: str, key: str, ceph_object: CephObject) -> ObjectMetadata:
        return self.put(
            bucket_name,
            key,
            ceph_object.metadata.content_type,
            ceph_object.metadata.user_metadata,
            io.BytesIO(ceph_object.content),
            content_length=len(ceph_object.content),
        )

    @traced("delete")
    def delete(self, bucket_name: str, keys: Iterable[str]) -> None:
        keys = unique_keys(keys)
        logger.info("Deleting files", extra={"bucket_name": bucket_name, "keys": keys})
        self._guard.assert_bucket_exists(bucket_name)

        if not keys:
            return

        delete_keys(self._guard, bucket_name, keys)
        logger.info("Files deleted", extra={"bucket_name": bucket_name, "keys": keys})

    @traced("delete_object")
    def delete_object(self, bucket_name: str, key: str) -> None:
        self.delete(bucket_name, [key])

    @traced("exist")
    def exist(self, bucket_name: str, key: str) -> bool:
        self._guard.assert_bucket_exists(bucket_name)
        result = self._guard.object_exists(bucket_name, key)
        logger.info(
            "Object existence checked",
            extra={"bucket_name": bucket_name, "object_name": key, "exists": result},
        )
        return result

    @traced("exist_all")
    def exist_all(self, bucket_name: str, keys: Iterable[str]) -> bool:
        keys = unique_keys(keys)
        self._guard.assert_bucket_exists(bucket_name)

        existence = self._guard.existence(bucket_name, keys)
        result = all(existence.values())
        logger.info(
            "Objects existence checked",
            extra={
                "bucket_name": bucket_name,
                "keys": keys,
                "missing": [key for key, exists in existence.items() if not exists],
                "exists": result,
            },
        )
        return result

    @traced("get_keys")
    def get_keys(self, bucket_name: str, prefix: str | None = None) -> set[str]:
        logger.info("Listing keys", extra={"bucket_name": bucket_name, "prefix": prefix})
        self._guard.assert_bucket_exists(bucket_name)

        result = list_keys(self._guard, bucket_name, prefix)
        logger.info(
            "Keys listed",
            extra={"bucket_name": bucket_name, "prefix": prefix, "count": len(result)},
        )
        return result

    @traced("get_metadata")
    def get_metadata(self, bucket_name: str, keys: Iterable[str]) -> list[ObjectMetadata]:
        keys = unique_keys(keys)
        logger.info("Getting files metadata", extra={"bucket_name": bucket_name, "keys": keys})
        self._guard.assert_bucket_exists(bucket_name)

        existence = self._guard.existence(bucket_name, keys)
        missing = [key for key, exists in existence.items() if not exists]
        if missing and self._batch_policy is BatchPolicy.ALL_OR_NOTHING:
            logger.info(
                "Some files not found, returning no metadata",
                extra={"bucket_name": bucket_name, "missing": missing},
            )
            return []

        present = [key for key in keys if existence[key]]
        return [stat_metadata(self._guard, bucket_name, key) for key in present]

    @traced("get_metadata_by_prefix")
    def get_metadata_by_prefix(self, bucket_name: str, prefix: str) -> list[ObjectMetadata]:
        keys = sorted(self.get_keys(bucket_name, prefix))
        return [stat_metadata(self._guard, bucket_name, key) for key in keys]

    @traced("set_user_metadata")
    def set_user_metadata(
        self, bucket_name: str, key: str, user_metadata: Mapping[str, str]
    ) -> ObjectMetadata:
        logger.info(
            "Replacing user metadata", extra={"bucket_name": bucket_name, "object_name": key}
        )
        self._guard.assert_bucket_exists(bucket_name)

        current = stat_metadata(self._guard, bucket_name, key)
        updated = current.model_copy(update={"user_metadata": dict(user_metadata)})

        # Object stores cannot edit metadata in place; copy the object onto itself
        self._guard.execute_runnable(
            lambda: self._client.copy_object(
                bucket_name,
                key,
                CopySource(bucket_name, key),
                metadata=updated.to_headers(),
                metadata_directive=REPLACE,
            )
        )
        return stat_metadata(self._guard, bucket_name, key)
