"""Configuration models loaded from environment variables."""

import os
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, Field


class BatchPolicy(str, Enum):
    """How multi-key metadata reads behave when some keys are missing."""

    ALL_OR_NOTHING = "all_or_nothing"
    PARTIAL_ALLOWED = "partial_allowed"


class CephConfig(BaseModel, frozen=True):
    """Ceph (S3-compatible) connection configuration."""

    endpoint: str
    access_key: str
    secret_key: str
    bucket_name: str = "documents"
    region: str | None = None

    @property
    def host(self) -> str:
        """Endpoint as host[:port], the form the minio client expects."""
        return split_endpoint(self.endpoint)[0]

    @property
    def secure(self) -> bool:
        return split_endpoint(self.endpoint)[1]


class ClientOptions(BaseModel, frozen=True):
    """HTTP client tuning for the underlying store client."""

    max_pool_connections: int = Field(default=10, ge=1)
    connect_timeout: float = Field(default=5.0, gt=0)
    read_timeout: float = Field(default=300.0, gt=0)
    max_retries: int = Field(default=5, ge=0)
    cert_check: bool = True


class StorageConfig(BaseModel, frozen=True):
    """Root storage configuration."""

    ceph: CephConfig
    client: ClientOptions = ClientOptions()
    batch_policy: BatchPolicy = BatchPolicy.ALL_OR_NOTHING
    metrics_enabled: bool = True


def split_endpoint(endpoint: str) -> tuple[str, bool]:
    """
    Splits an endpoint into host[:port] and whether TLS is used.

    Accepts both URLs ("http://ceph:7480") and bare hosts ("ceph:7480");
    bare hosts are treated as plain HTTP.
    """
    if "://" not in endpoint:
        return endpoint.rstrip("/"), False
    parts = urlsplit(endpoint)
    return parts.netloc, parts.scheme == "https"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


def load_config() -> StorageConfig:
    """Loads configuration from environment variables."""
    return StorageConfig(
        ceph=CephConfig(
            endpoint=os.getenv("CEPH_HTTP_ENDPOINT", "http://ceph:7480"),
            access_key=os.getenv("CEPH_ACCESS_KEY", ""),
            secret_key=os.getenv("CEPH_SECRET_KEY", ""),
            bucket_name=os.getenv("CEPH_BUCKET", "documents"),
            region=os.getenv("CEPH_REGION") or None,
        ),
        client=ClientOptions(
            max_pool_connections=int(os.getenv("CEPH_MAX_CONNECTIONS", "10")),
            connect_timeout=float(os.getenv("CEPH_CONNECT_TIMEOUT", "5")),
            read_timeout=float(os.getenv("CEPH_READ_TIMEOUT", "300")),
            max_retries=int(os.getenv("CEPH_MAX_RETRIES", "5")),
        ),
        batch_policy=BatchPolicy(os.getenv("CEPH_BATCH_POLICY", "all_or_nothing")),
        metrics_enabled=_env_bool("CEPH_METRICS_ENABLED", True),
    )
