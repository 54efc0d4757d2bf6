"""Store calls shared by the facades, each run through a StorageGuard."""

import io
from collections.abc import Iterable
from typing import BinaryIO

from minio.deleteobjects import DeleteObject

from ceph_integration.exceptions import CephCommunicationError
from ceph_integration.infrastructure.guard import StorageGuard
from ceph_integration.models import ObjectMetadata

# Part size minio uses to stream uploads of unknown length
UNKNOWN_LENGTH_PART_SIZE = 10 * 1024 * 1024

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def unique_keys(keys: Iterable[str]) -> list[str]:
    """Collapses duplicate keys, keeping first-seen order."""
    return list(dict.fromkeys(keys))


def resolve_length(data: BinaryIO, content_length: int | None) -> tuple[int, int]:
    """
    Decides the length and part size to pass to `Minio.put_object`.

    A declared length always wins, even when it disagrees with the stream.
    Otherwise the remaining length of a seekable stream is measured; a
    non-seekable stream is uploaded with unknown length (-1) in parts.

    Returns:
        Tuple of (length, part_size); part_size 0 lets minio choose.
    """
    if content_length is not None:
        return content_length, 0

    if _seekable(data):
        position = data.tell()
        end = data.seek(0, io.SEEK_END)
        data.seek(position)
        return end - position, 0

    return -1, UNKNOWN_LENGTH_PART_SIZE


def _seekable(data: BinaryIO) -> bool:
    seekable = getattr(data, "seekable", None)
    try:
        return bool(seekable and seekable())
    except (OSError, ValueError):
        return False


def stat_metadata(guard: StorageGuard, bucket_name: str, key: str) -> ObjectMetadata:
    """Reads an object's metadata as currently stored."""
    stat = guard.execute(lambda: guard.client.stat_object(bucket_name, key))
    return ObjectMetadata.from_headers(stat.metadata)


def list_keys(guard: StorageGuard, bucket_name: str, prefix: str | None) -> set[str]:
    """Lists every key under the prefix (the whole bucket when prefix is None)."""
    return guard.execute(
        lambda: {
            obj.object_name
            for obj in guard.client.list_objects(bucket_name, prefix=prefix, recursive=True)
        }
    )


def delete_keys(guard: StorageGuard, bucket_name: str, keys: list[str]) -> None:
    """Issues one batch delete and fails if the store rejected any key."""

    def remove() -> None:
        # remove_objects is lazy; nothing is sent until the errors are consumed
        errors = list(
            guard.client.remove_objects(bucket_name, [DeleteObject(key) for key in keys])
        )
        if errors:
            failed = sorted(error.name for error in errors)
            raise CephCommunicationError(
                f"Failed to delete {len(failed)} of {len(keys)} keys from bucket "
                f"'{bucket_name}': {', '.join(failed)}"
            )

    guard.execute_runnable(remove)
