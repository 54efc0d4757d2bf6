"""Pytest configuration and fixtures for storage facade tests."""

from __future__ import annotations

import os

# Spans are created but never shipped to an agent during tests
os.environ.setdefault("DD_TRACE_ENABLED", "false")

import pytest  # noqa: E402

from ceph_integration.config import BatchPolicy  # noqa: E402
from ceph_integration.infrastructure import (  # noqa: E402
    JsonFormDataStorage,
    MinioBucketStorage,
    MinioCephService,
    StorageGuard,
)
from tests.fakes import FakeMinio  # noqa: E402

BUCKET = "bucket"


@pytest.fixture
def bucket_name() -> str:
    return BUCKET


@pytest.fixture
def client() -> FakeMinio:
    """Fake store holding a single empty bucket."""
    return FakeMinio(buckets=[BUCKET])


@pytest.fixture
def guard(client: FakeMinio) -> StorageGuard:
    return StorageGuard(client)


@pytest.fixture
def service(guard: StorageGuard) -> MinioCephService:
    return MinioCephService(guard)


@pytest.fixture
def partial_service(guard: StorageGuard) -> MinioCephService:
    return MinioCephService(guard, BatchPolicy.PARTIAL_ALLOWED)


@pytest.fixture
def bucket_storage(guard: StorageGuard) -> MinioBucketStorage:
    return MinioBucketStorage(guard, BUCKET)


@pytest.fixture
def form_storage(service: MinioCephService) -> JsonFormDataStorage:
    return JsonFormDataStorage(service, BUCKET)
