"""Concrete implementations of infrastructure interfaces."""

from ceph_integration.infrastructure.bucket_storage import MinioBucketStorage
from ceph_integration.infrastructure.form_data_storage import JsonFormDataStorage
from ceph_integration.infrastructure.guard import StorageGuard
from ceph_integration.infrastructure.minio_storage import MinioCephService

__all__ = [
    "JsonFormDataStorage",
    "MinioBucketStorage",
    "MinioCephService",
    "StorageGuard",
]
