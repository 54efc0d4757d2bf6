"""In-memory stand-in for the MinIO client used by the facade tests."""

from __future__ import annotations

import io
from types import SimpleNamespace
from typing import Any

from minio.error import S3Error
from urllib3 import HTTPHeaderDict


def s3_error(code: str, bucket_name: str | None = None, object_name: str | None = None) -> S3Error:
    return S3Error(
        code=code,
        message=f"{code} raised by fake",
        resource=f"/{bucket_name}/{object_name}",
        request_id="req-1",
        host_id="host-1",
        response=None,
        bucket_name=bucket_name,
        object_name=object_name,
    )


class FakeResponse:
    """Mimics the urllib3 response returned by `Minio.get_object`."""

    def __init__(self, content: bytes, headers: HTTPHeaderDict):
        self.headers = headers
        self._body = io.BytesIO(content)
        self.closed = False
        self.released = False

    @property
    def data(self) -> bytes:
        return self._body.read()

    def read(self) -> bytes:
        return self._body.read()

    def stream(self, amt: int = 65536):
        while chunk := self._body.read(amt):
            yield chunk

    def close(self) -> None:
        self.closed = True

    def release_conn(self) -> None:
        self.released = True


class FakeMinio:
    """
    Keeps buckets and objects in dictionaries.

    `faults` maps a method name to the exception it raises; `delete_failures`
    lists keys the batch delete reports as failed. Every call is appended to
    `calls` as (method, args).
    """

    def __init__(self, buckets: list[str] | None = None):
        self.buckets: dict[str, dict[str, tuple[bytes, HTTPHeaderDict]]] = {
            name: {} for name in (buckets or [])
        }
        self.faults: dict[str, Exception] = {}
        self.delete_failures: set[str] = set()
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.responses: list[FakeResponse] = []

    def add_object(
        self,
        bucket_name: str,
        object_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        user_metadata: dict[str, str] | None = None,
    ) -> None:
        headers = HTTPHeaderDict()
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(content))
        for key, value in (user_metadata or {}).items():
            headers[f"x-amz-meta-{key.lower()}"] = value
        self.buckets[bucket_name][object_name] = (content, headers)

    def method_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.faults:
            raise self.faults[name]

    def _objects(self, bucket_name: str) -> dict[str, tuple[bytes, HTTPHeaderDict]]:
        if bucket_name not in self.buckets:
            raise s3_error("NoSuchBucket", bucket_name)
        return self.buckets[bucket_name]

    def _lookup(self, bucket_name: str, object_name: str) -> tuple[bytes, HTTPHeaderDict]:
        objects = self._objects(bucket_name)
        if object_name not in objects:
            raise s3_error("NoSuchKey", bucket_name, object_name)
        return objects[object_name]

    def list_buckets(self):
        self._record("list_buckets")
        return [SimpleNamespace(name=name) for name in self.buckets]

    def stat_object(self, bucket_name: str, object_name: str):
        self._record("stat_object", bucket_name, object_name)
        content, headers = self._lookup(bucket_name, object_name)
        return SimpleNamespace(
            bucket_name=bucket_name,
            object_name=object_name,
            size=len(content),
            content_type=headers.get("Content-Type"),
            metadata=HTTPHeaderDict(headers),
        )

    def get_object(self, bucket_name: str, object_name: str):
        self._record("get_object", bucket_name, object_name)
        content, headers = self._lookup(bucket_name, object_name)
        response = FakeResponse(content, HTTPHeaderDict(headers))
        self.responses.append(response)
        return response

    def put_object(
        self,
        bucket_name: str,
        object_name: str,
        data,
        length: int,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
        part_size: int = 0,
    ):
        self._record("put_object", bucket_name, object_name, length, part_size)
        objects = self._objects(bucket_name)
        content = data.read() if length == -1 else data.read(length)
        headers = HTTPHeaderDict()
        headers["Content-Type"] = content_type
        # A declared length is what the store records
        headers["Content-Length"] = str(len(content) if length == -1 else length)
        for key, value in (metadata or {}).items():
            headers[key.lower()] = value
        objects[object_name] = (content, headers)
        return SimpleNamespace(bucket_name=bucket_name, object_name=object_name)

    def remove_objects(self, bucket_name: str, delete_object_list):
        self._record("remove_objects", bucket_name)
        objects = self._objects(bucket_name)

        def results():
            for delete_object in delete_object_list:
                if delete_object._name in self.delete_failures:
                    yield SimpleNamespace(
                        name=delete_object._name, code="AccessDenied", message="Access Denied"
                    )
                else:
                    objects.pop(delete_object._name, None)

        return results()

    def list_objects(self, bucket_name: str, prefix: str | None = None, recursive: bool = False):
        self._record("list_objects", bucket_name, prefix, recursive)
        objects = self._objects(bucket_name)
        for name in list(objects):
            if prefix is None or name.startswith(prefix):
                yield SimpleNamespace(object_name=name)

    def copy_object(
        self,
        bucket_name: str,
        object_name: str,
        source,
        metadata: dict[str, str] | None = None,
        metadata_directive: str | None = None,
    ):
        self._record("copy_object", bucket_name, object_name, metadata_directive)
        content, source_headers = self._lookup(source.bucket_name, source.object_name)
        if metadata_directive == "REPLACE":
            headers = HTTPHeaderDict()
            headers["Content-Type"] = (metadata or {}).get(
                "Content-Type", "application/octet-stream"
            )
            headers["Content-Length"] = str(len(content))
            for key, value in (metadata or {}).items():
                if key.lower().startswith("x-amz-meta-"):
                    headers[key.lower()] = value
        else:
            headers = HTTPHeaderDict(source_headers)
        self._objects(bucket_name)[object_name] = (content, headers)
        return SimpleNamespace(bucket_name=bucket_name, object_name=object_name)
