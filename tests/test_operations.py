"""Tests for the store calls shared by both facades."""

from __future__ import annotations

import io

from ceph_integration.infrastructure.operations import (
    UNKNOWN_LENGTH_PART_SIZE,
    resolve_length,
    unique_keys,
)


class Unseekable:
    def read(self, size: int = -1) -> bytes:
        return b""


def test_unique_keys_keeps_first_seen_order() -> None:
    assert unique_keys(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_declared_length_wins() -> None:
    assert resolve_length(io.BytesIO(b"0123456789"), 4) == (4, 0)


def test_declared_zero_length() -> None:
    assert resolve_length(io.BytesIO(b""), 0) == (0, 0)


def test_measures_remaining_length_without_moving_the_stream() -> None:
    data = io.BytesIO(b"0123456789")
    data.seek(3)

    assert resolve_length(data, None) == (7, 0)
    assert data.tell() == 3


def test_stream_without_seek_support_uses_unknown_length() -> None:
    assert resolve_length(Unseekable(), None) == (-1, UNKNOWN_LENGTH_PART_SIZE)
