"""Custom exceptions for Ceph storage access."""


class CephStorageError(Exception):
    """Base class for all errors raised by the storage facades."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class MisconfigurationError(CephStorageError):
    """Raised when the configured bucket is not visible to the store credentials."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        super().__init__(f"Bucket '{bucket_name}' hasn't been found")


class CephCommunicationError(CephStorageError):
    """Raised when any call to the object store fails (network, auth, 4xx/5xx)."""

    @classmethod
    def from_cause(cls, cause: Exception) -> "CephCommunicationError":
        """Builds the error from the original failure, keeping its message."""
        return cls(str(cause) or type(cause).__name__, cause)


class MalformedContentError(CephStorageError):
    """Raised when stored content cannot be decoded into the expected document."""

    def __init__(self, key: str, cause: Exception | None = None):
        self.key = key
        super().__init__(f"Couldn't deserialize content stored under '{key}'", cause)
