"""Tests for the single-bucket storage facade."""

from __future__ import annotations

import io

import pytest

from ceph_integration.config import BatchPolicy
from ceph_integration.exceptions import CephCommunicationError, MisconfigurationError
from ceph_integration.infrastructure import MinioBucketStorage, StorageGuard
from tests.fakes import FakeMinio


@pytest.fixture
def partial_bucket_storage(guard: StorageGuard) -> MinioBucketStorage:
    return MinioBucketStorage(guard, "bucket", BatchPolicy.PARTIAL_ALLOWED)


class TestMisconfiguration:
    def test_unknown_bucket_fails_on_first_use(self, guard: StorageGuard, client: FakeMinio) -> None:
        storage = MinioBucketStorage(guard, "missing")

        with pytest.raises(MisconfigurationError, match="'missing'"):
            storage.get("key")

        assert client.method_names() == ["list_buckets"]


class TestGet:
    def test_absent_key_returns_none(self, bucket_storage: MinioBucketStorage) -> None:
        assert bucket_storage.get("missing") is None

    def test_returns_open_stream_with_metadata(
        self, bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "key", b"payload", "text/plain", {"filename": "a.txt"})

        with bucket_storage.get("key") as streamed:
            assert streamed.metadata.content_type == "text/plain"
            assert streamed.metadata.user_metadata == {"filename": "a.txt"}
            assert b"".join(streamed.stream(chunk_size=3)) == b"payload"
            assert not client.responses[-1].released

        assert streamed.closed
        assert client.responses[-1].closed
        assert client.responses[-1].released

    def test_read_after_close_fails(
        self, bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "key", b"payload")
        streamed = bucket_storage.get("key")
        streamed.close()

        with pytest.raises(ValueError, match="already closed"):
            streamed.read()


class TestPut:
    def test_put_returns_stored_metadata(self, bucket_storage: MinioBucketStorage) -> None:
        stored = bucket_storage.put("key", "text/csv", {"id": "7"}, io.BytesIO(b"a,b\n"))

        assert stored.content_type == "text/csv"
        assert stored.content_length == 4
        assert stored.user_metadata == {"id": "7"}
        with bucket_storage.get("key") as streamed:
            assert streamed.read() == b"a,b\n"


class TestGetMetadata:
    def test_all_present(self, bucket_storage: MinioBucketStorage, client: FakeMinio) -> None:
        client.add_object("bucket", "a", b"1")
        client.add_object("bucket", "b", b"22")

        result = bucket_storage.get_metadata(["a", "b"])

        assert [metadata.content_length for metadata in result] == [1, 2]

    def test_any_absent_key_returns_none(
        self, bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "a", b"1")

        assert bucket_storage.get_metadata(["a", "missing"]) is None

    def test_partial_policy_returns_present_keys(
        self, partial_bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "a", b"1")

        result = partial_bucket_storage.get_metadata(["missing", "a"])

        assert [metadata.content_length for metadata in result] == [1]

    def test_empty_key_set_returns_empty_list(self, bucket_storage: MinioBucketStorage) -> None:
        assert bucket_storage.get_metadata([]) == []


class TestDeleteAndExist:
    def test_delete_then_absent(
        self, bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "a", b"1")
        client.add_object("bucket", "b", b"2")

        assert bucket_storage.exist(["a", "b"]) is True
        bucket_storage.delete(["a", "b"])

        assert bucket_storage.exist(["a"]) is False
        assert bucket_storage.exist(["b"]) is False

    def test_partial_delete_failure(
        self, bucket_storage: MinioBucketStorage, client: FakeMinio
    ) -> None:
        client.add_object("bucket", "a", b"1")
        client.delete_failures.add("a")

        with pytest.raises(CephCommunicationError, match="a"):
            bucket_storage.delete(["a"])


class TestGetKeys:
    def test_keys_are_sorted(self, bucket_storage: MinioBucketStorage, client: FakeMinio) -> None:
        for key in ["p/c", "p/a", "p/b", "q/a"]:
            client.add_object("bucket", key, b"x")

        assert bucket_storage.get_keys("p/") == ["p/a", "p/b", "p/c"]
