"""Abstract interface for form document storage."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ceph_integration.models import FormData


class FormDataStorage(ABC):
    """Abstract base class for form documents stored in a fixed bucket."""

    @abstractmethod
    def get_form_data(self, key: str) -> FormData | None:
        """
        Retrieves a form document by key.

        Args:
            key: The document id.

        Returns:
            The document, or None if the key is absent.

        Raises:
            MisconfigurationError: If the configured bucket does not exist.
            CephCommunicationError: If the store call fails.
            MalformedContentError: If the stored content is not a valid document.
        """
        pass

    @abstractmethod
    def put_form_data(self, key: str, form_data: FormData) -> None:
        """
        Stores a form document as JSON.

        Raises:
            MisconfigurationError: If the configured bucket does not exist.
            CephCommunicationError: If the store call fails.
        """
        pass

    @abstractmethod
    def delete_form_data(self, keys: Iterable[str]) -> None:
        """Deletes form documents by key."""
        pass

    @abstractmethod
    def exist(self, key: str) -> bool:
        """Checks whether a form document exists."""
        pass
