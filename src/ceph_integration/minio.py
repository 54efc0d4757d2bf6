import logging
import os

import certifi
from minio import Minio
from urllib3 import Retry, Timeout

from ceph_integration.config import ClientOptions, split_endpoint
from ceph_integration.http import MetricsPoolManager
from ceph_integration.infrastructure.interfaces import RequestMetricCollector

logger = logging.getLogger(__name__)

RETRY_STATUSES = [500, 502, 503, 504]


def build_http_client(
    options: ClientOptions,
    collector: RequestMetricCollector | None = None,
) -> MetricsPoolManager:
    """
    Builds the pooled HTTP client the MinIO client sends requests through.

    Args:
        options: Pool size, timeouts, retry count and certificate checking.
        collector: Receives a record per request; None disables metrics.

    Returns:
        MetricsPoolManager: Configured pool manager.
    """
    return MetricsPoolManager(
        collector=collector,
        timeout=Timeout(connect=options.connect_timeout, read=options.read_timeout),
        maxsize=options.max_pool_connections,
        cert_reqs="CERT_REQUIRED" if options.cert_check else "CERT_NONE",
        ca_certs=os.environ.get("SSL_CERT_FILE") or certifi.where(),
        retries=Retry(
            total=options.max_retries,
            backoff_factor=0.2,
            status_forcelist=RETRY_STATUSES,
        ),
    )


def get_minio_client(
    endpoint,
    access_key,
    secret_key,
    *,
    options: ClientOptions | None = None,
    collector: RequestMetricCollector | None = None,
    region: str | None = None,
):
    """
    Initialize and return a MinIO client pointed at a Ceph endpoint.

    Args:
        endpoint: "http(s)://host:port" or "host:port" (plain HTTP).
        access_key: Ceph access key.
        secret_key: Ceph secret key.
        options: HTTP client tuning; defaults apply when omitted.
        collector: Request metric collector attached to the HTTP client.
        region: Region name; skips the bucket location lookup when set.

    Returns:
        Minio: Configured MinIO client
    """
    host, secure = split_endpoint(endpoint)
    try:
        client = Minio(
            endpoint=host,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region,
            http_client=build_http_client(options or ClientOptions(), collector),
        )
        return client
    except Exception as e:
        logger.exception(
            "MinIO Client Initialization Failed",
            extra={
                "endpoint": endpoint,
                "user": access_key,
            },
        )
        raise e
