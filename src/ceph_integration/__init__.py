from ceph_integration.config import (
    BatchPolicy,
    CephConfig,
    ClientOptions,
    StorageConfig,
    load_config,
)
from ceph_integration.exceptions import (
    CephCommunicationError,
    CephStorageError,
    MalformedContentError,
    MisconfigurationError,
)
from ceph_integration.factory import CephStorageFactory
from ceph_integration.infrastructure import (
    JsonFormDataStorage,
    MinioBucketStorage,
    MinioCephService,
    StorageGuard,
)
from ceph_integration.infrastructure.interfaces import (
    BucketStorage,
    CephService,
    FormDataStorage,
    RequestMetricCollector,
)
from ceph_integration.logging import setup_logging
from ceph_integration.metrics import (
    OperationInfo,
    OperationKind,
    PrometheusMetricsCollector,
    classify,
)
from ceph_integration.minio import get_minio_client
from ceph_integration.models import (
    CephObject,
    FormData,
    ObjectMetadata,
    StreamedObject,
    UserMetadataHeaders,
)

__all__ = [
    "setup_logging",
    "get_minio_client",
    "BatchPolicy",
    "CephConfig",
    "ClientOptions",
    "StorageConfig",
    "load_config",
    "CephStorageError",
    "CephCommunicationError",
    "MalformedContentError",
    "MisconfigurationError",
    "CephStorageFactory",
    "CephService",
    "BucketStorage",
    "FormDataStorage",
    "RequestMetricCollector",
    "MinioCephService",
    "MinioBucketStorage",
    "JsonFormDataStorage",
    "StorageGuard",
    "OperationInfo",
    "OperationKind",
    "PrometheusMetricsCollector",
    "classify",
    "CephObject",
    "FormData",
    "ObjectMetadata",
    "StreamedObject",
    "UserMetadataHeaders",
]
