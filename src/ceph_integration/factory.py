"""Builds storage facades from connection settings."""

import logging

from minio import Minio
from prometheus_client import REGISTRY, CollectorRegistry

from ceph_integration.config import BatchPolicy, ClientOptions, StorageConfig
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
from ceph_integration.metrics import PrometheusMetricsCollector
from ceph_integration.minio import get_minio_client

logger = logging.getLogger(__name__)


class CephStorageFactory:
    """Creates clients and facades sharing one set of client options."""

    def __init__(
        self,
        options: ClientOptions | None = None,
        collector: RequestMetricCollector | None = None,
        batch_policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING,
        region: str | None = None,
    ):
        self._options = options or ClientOptions()
        self._collector = collector
        self._batch_policy = batch_policy
        self._region = region

    @classmethod
    def from_config(
        cls, config: StorageConfig, registry: CollectorRegistry = REGISTRY
    ) -> "CephStorageFactory":
        """Creates a factory, with a Prometheus collector when metrics are enabled."""
        collector = PrometheusMetricsCollector(registry) if config.metrics_enabled else None
        return cls(
            options=config.client,
            collector=collector,
            batch_policy=config.batch_policy,
            region=config.ceph.region,
        )

    @property
    def collector(self) -> RequestMetricCollector | None:
        return self._collector

    def create_client(self, endpoint: str, access_key: str, secret_key: str) -> Minio:
        return get_minio_client(
            endpoint,
            access_key,
            secret_key,
            options=self._options,
            collector=self._collector,
            region=self._region,
        )

    def create_ceph_service(self, endpoint: str, access_key: str, secret_key: str) -> CephService:
        """Returns a facade taking the bucket name on every call."""
        guard = StorageGuard(self.create_client(endpoint, access_key, secret_key))
        logger.info("Ceph service created", extra={"endpoint": endpoint})
        return MinioCephService(guard, self._batch_policy)

    def create_bucket_storage(
        self, endpoint: str, access_key: str, secret_key: str, bucket_name: str
    ) -> BucketStorage:
        """Returns a facade bound to one bucket, streaming object content."""
        guard = StorageGuard(self.create_client(endpoint, access_key, secret_key))
        return MinioBucketStorage(guard, bucket_name, self._batch_policy)

    def create_form_data_storage(
        self, endpoint: str, access_key: str, secret_key: str, bucket_name: str
    ) -> FormDataStorage:
        """Returns JSON form document storage in a fixed bucket."""
        return JsonFormDataStorage(
            self.create_ceph_service(endpoint, access_key, secret_key), bucket_name
        )
