"""Abstract interface for bucket-scoped content operations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from ceph_integration.models import CephObject, ObjectMetadata


class CephService(ABC):
    """Abstract base class for content storage taking the bucket on every call."""

    @abstractmethod
    def get(self, bucket_name: str, key: str) -> CephObject | None:
        """
        Retrieves an object with its content fully read into memory.

        Args:
            bucket_name: The storage bucket name.
            key: The object key.

        Returns:
            The object content and metadata, or None if the key is absent.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def get_as_string(self, bucket_name: str, key: str) -> str | None:
        """
        Retrieves an object's content decoded as UTF-8.

        Args:
            bucket_name: The storage bucket name.
            key: The object key.

        Returns:
            The content string, or None if the key is absent.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def put_content(self, bucket_name: str, key: str, content: str) -> None:
        """
        Stores a string as UTF-8 content without user metadata.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def put(
        self,
        bucket_name: str,
        key: str,
        content_type: str | None,
        user_metadata: Mapping[str, str] | None,
        data: BinaryIO,
        content_length: int | None = None,
    ) -> ObjectMetadata:
        """
        Stores a stream with content type and user metadata.

        Args:
            bucket_name: The storage bucket name.
            key: The object key.
            content_type: MIME type of the content.
            user_metadata: Caller-defined key/value pairs.
            data: File-like object containing the data.
            content_length: Declared size. Overrides any inferred size, even
                when it disagrees with the stream.

        Returns:
            The metadata as stored, read back after the write.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def put_object(self, bucket_name: str, key: str, ceph_object: CephObject) -> ObjectMetadata:
        """
        Stores materialized content together with its metadata.

        Returns:
            The metadata as stored, read back after the write.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def delete(self, bucket_name: str, keys: Iterable[str]) -> None:
        """
        Deletes keys with a single batch request.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the request fails or any key in it
                could not be deleted.
        """
        pass

    @abstractmethod
    def delete_object(self, bucket_name: str, key: str) -> None:
        """Deletes a single key. Same errors as `delete`."""
        pass

    @abstractmethod
    def exist(self, bucket_name: str, key: str) -> bool:
        """
        Checks whether a key exists.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def exist_all(self, bucket_name: str, keys: Iterable[str]) -> bool:
        """
        Checks whether every key exists, probing each one.

        Returns:
            True only if all keys exist (True for an empty collection).

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If any probe fails.
        """
        pass

    @abstractmethod
    def get_keys(self, bucket_name: str, prefix: str | None = None) -> set[str]:
        """
        Lists keys in the bucket, optionally restricted to a prefix.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the listing fails.
        """
        pass

    @abstractmethod
    def get_metadata(self, bucket_name: str, keys: Iterable[str]) -> list[ObjectMetadata]:
        """
        Retrieves metadata for each key.

        Under the all-or-nothing batch policy a single missing key makes the
        result empty; under the partial policy missing keys are skipped.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If any store call fails.
        """
        pass

    @abstractmethod
    def get_metadata_by_prefix(self, bucket_name: str, prefix: str) -> list[ObjectMetadata]:
        """
        Retrieves metadata for every key under a prefix.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If any store call fails.
        """
        pass

    @abstractmethod
    def set_user_metadata(
        self, bucket_name: str, key: str, user_metadata: Mapping[str, str]
    ) -> ObjectMetadata:
        """
        Replaces an object's user metadata, keeping its content and content type.

        Returns:
            The metadata as stored after the update.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the object is missing or a store call fails.
        """
        pass
