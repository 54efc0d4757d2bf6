"""Data models for stored objects, their metadata and JSON form documents."""

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from urllib3 import BaseHTTPResponse

USER_METADATA_PREFIX = "x-amz-meta-"

DEFAULT_CHUNK_SIZE = 64 * 1024


class UserMetadataHeaders:
    """Well-known user metadata keys attached to stored files."""

    ID = "id"
    CHECKSUM = "checksum"
    FILENAME = "filename"


class ObjectMetadata(BaseModel, frozen=True):
    """
    Header state of a stored object at the moment it was read.

    User metadata keys are case-insensitive on the wire; they are kept here
    exactly as the store returned them.
    """

    content_type: str | None = None
    content_length: int | None = Field(default=None, ge=0)
    user_metadata: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ObjectMetadata":
        """
        Converts a store response header map into object metadata.

        Args:
            headers: Response headers of a HEAD or GET object call.

        Returns:
            ObjectMetadata with content type, length and user metadata.
        """
        content_type = None
        content_length = None
        user_metadata: dict[str, str] = {}

        for name, value in headers.items():
            lowered = name.lower()
            if lowered == "content-type":
                content_type = value
            elif lowered == "content-length":
                content_length = int(value)
            elif lowered.startswith(USER_METADATA_PREFIX):
                user_metadata[name[len(USER_METADATA_PREFIX) :]] = value

        return cls(
            content_type=content_type,
            content_length=content_length,
            user_metadata=user_metadata,
        )

    def to_headers(self) -> dict[str, str]:
        """
        Converts the metadata into request headers for a metadata rewrite.

        Content length is not a writable header and is left out.
        """
        headers = {
            f"{USER_METADATA_PREFIX}{key}": value
            for key, value in self.user_metadata.items()
        }
        if self.content_type:
            headers["Content-Type"] = self.content_type
        return headers


def user_metadata_headers(user_metadata: Mapping[str, str] | None) -> dict[str, str]:
    """Prefixes plain user metadata keys for a put request."""
    return {
        f"{USER_METADATA_PREFIX}{key}": str(value)
        for key, value in (user_metadata or {}).items()
    }


class CephObject(BaseModel, frozen=True):
    """A fully materialized object: owned content bytes plus metadata."""

    content: bytes
    metadata: ObjectMetadata = Field(default_factory=ObjectMetadata)


class StreamedObject:
    """
    A stored object whose content is still on the wire.

    The handle owns the underlying HTTP response. It must be closed once the
    caller is done with it so the connection goes back to the pool; use it
    as a context manager to get that on every exit path.
    """

    def __init__(self, key: str, response: BaseHTTPResponse, metadata: ObjectMetadata):
        self.key = key
        self.metadata = metadata
        self._response = response
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self) -> bytes:
        """Reads the remaining content into memory."""
        self._ensure_open()
        return self._response.read()

    def stream(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Returns an iterator over the content in chunks, without buffering it whole."""
        self._ensure_open()
        return self._response.stream(chunk_size)

    def close(self) -> None:
        """Closes the response and releases its connection. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
        finally:
            self._response.release_conn()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ValueError(f"Stream for '{self.key}' is already closed")

    def __enter__(self) -> "StreamedObject":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"StreamedObject(key={self.key!r}, closed={self._closed})"


class FormData(BaseModel):
    """A submitted form document stored as JSON."""

    model_config = ConfigDict(populate_by_name=True)

    data: dict[str, Any] = Field(default_factory=dict)
    access_token: str | None = Field(default=None, alias="x-access-token")
    signature: str | None = None

    def to_json(self) -> str:
        """Serializes the document, leaving out unset token and signature."""
        # exclude_none would also strip null values inside `data`
        exclude = {name for name in ("access_token", "signature") if getattr(self, name) is None}
        return self.model_dump_json(by_alias=True, exclude=exclude)
