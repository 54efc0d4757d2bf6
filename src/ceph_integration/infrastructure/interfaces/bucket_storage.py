"""Abstract interface for file storage in one configured bucket."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from ceph_integration.models import ObjectMetadata, StreamedObject


class BucketStorage(ABC):
    """Abstract base class for file storage bound to a single bucket."""

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """The bucket every operation targets."""

    @abstractmethod
    def put(
        self,
        key: str,
        content_type: str | None,
        user_metadata: Mapping[str, str] | None,
        data: BinaryIO,
        content_length: int | None = None,
    ) -> ObjectMetadata:
        """
        Uploads a file.

        Args:
            key: The object key.
            content_type: MIME type of the file.
            user_metadata: Additional user metadata.
            data: File-like object containing the data.
            content_length: Declared size, overriding inference.

        Returns:
            The metadata of the saved object.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the upload fails.
        """

    @abstractmethod
    def get(self, key: str) -> StreamedObject | None:
        """
        Opens a stored file for streaming.

        The returned handle holds a pooled connection; close it (or use it in
        a `with` block) when done.

        Returns:
            The streamed object, or None if the key is absent.

        Raises:
            MisconfigurationError: If the bucket does not exist.
            CephCommunicationError: If the download fails.
        """

    @abstractmethod
    def get_metadata(self, keys: Iterable[str]) -> list[ObjectMetadata] | None:
        """
        Retrieves metadata for the keys.

        Returns:
            Metadata per key, or None when the all-or-nothing policy finds a
            missing key.
        """

    @abstractmethod
    def delete(self, keys: Iterable[str]) -> None:
        """Deletes the keys in a single batch request."""

    @abstractmethod
    def exist(self, keys: Iterable[str]) -> bool:
        """Returns True if every key exists."""

    @abstractmethod
    def get_keys(self, prefix: str) -> list[str]:
        """Lists keys beginning with the prefix, sorted."""
