"""Bucket guard and error translation shared by every storage facade."""

import logging
from collections.abc import Callable
from typing import TypeVar

from minio import Minio
from minio.error import S3Error

from ceph_integration.exceptions import (
    CephCommunicationError,
    CephStorageError,
    MisconfigurationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "ResourceNotFound"})


def is_not_found(error: Exception) -> bool:
    """Tells whether a store error means the object does not exist."""
    return isinstance(error, S3Error) and error.code in NOT_FOUND_CODES


class StorageGuard:
    """
    Preconditions and error translation around raw store calls.

    Facades receive one of these instead of inheriting the behavior, so every
    facade variant checks buckets and translates failures the same way.
    """

    def __init__(self, client: Minio):
        self._client = client

    @property
    def client(self) -> Minio:
        return self._client

    def execute(self, supplier: Callable[[], T]) -> T:
        """
        Runs a store call and returns its result.

        Raises:
            CephCommunicationError: If the call fails for any reason; the
                original error is chained as the cause.
        """
        try:
            return supplier()
        except CephStorageError:
            raise
        except Exception as e:
            logger.exception("Ceph call failed", extra={"error_type": type(e).__name__})
            raise CephCommunicationError.from_cause(e) from e

    def execute_runnable(self, action: Callable[[], object]) -> None:
        """Runs a store call for its side effect, translating failures like `execute`."""
        self.execute(action)

    def assert_bucket_exists(self, bucket_name: str) -> None:
        """
        Checks that the bucket is listed under the active credentials.

        Raises:
            MisconfigurationError: If no bucket has exactly this name.
            CephCommunicationError: If the buckets cannot be listed.
        """
        logger.debug("Checking bucket exists", extra={"bucket_name": bucket_name})
        buckets = self.execute(self._client.list_buckets)
        if not any(bucket.name == bucket_name for bucket in buckets):
            logger.error("Bucket not found", extra={"bucket_name": bucket_name})
            raise MisconfigurationError(bucket_name)

    def object_exists(self, bucket_name: str, object_name: str) -> bool:
        """Probes a single key; a not-found answer is a normal False, not an error."""

        def probe() -> bool:
            try:
                self._client.stat_object(bucket_name, object_name)
            except S3Error as e:
                if is_not_found(e):
                    return False
                raise
            return True

        return self.execute(probe)

    def existence(self, bucket_name: str, object_names: list[str]) -> dict[str, bool]:
        """
        Probes every key, one request per key.

        Every key is evaluated even after a miss, so the result and the
        request count do not depend on key order.
        """
        return {name: self.object_exists(bucket_name, name) for name in object_names}
