"""Per-request storage metrics: pool gauges, error counts and latency.

Every request the store client sends is reported as a `RequestRecord`.
Connection pool gauges are updated for all of them; error counts and latency
are recorded only for requests `classify` recognises as an object put, get,
list, delete or copy, tagged with the bucket and operation name.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple
from urllib.parse import parse_qs, unquote, urlsplit

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from ceph_integration.infrastructure.interfaces import RequestMetricCollector

logger = logging.getLogger(__name__)

POOL_AVAILABLE = "storage_pool_available"
POOL_LEASED = "storage_pool_leased"
POOL_PENDING = "storage_pool_pending"
EXCEPTION_COUNT = "storage_exception_count"
LATENCY_PREFIX = "storage_latency"
CLIENT_EXECUTE_TIME = "client_execute_time"

DEFAULT_LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000)

# Query parameters that turn a bucket or object URL into a different API call
_SUBRESOURCES = frozenset(
    {
        "accelerate",
        "acl",
        "cors",
        "delete",
        "encryption",
        "legal-hold",
        "lifecycle",
        "location",
        "logging",
        "notification",
        "object-lock",
        "partNumber",
        "policy",
        "policyStatus",
        "replication",
        "requestPayment",
        "restore",
        "retention",
        "select",
        "tagging",
        "uploadId",
        "uploads",
        "versioning",
        "website",
    }
)


class OperationKind(str, Enum):
    """Object operations that get latency and error metrics."""

    PUT_OBJECT = "PutObjectRequest"
    GET_OBJECT = "GetObjectRequest"
    LIST_OBJECTS = "ListObjectsRequest"
    DELETE_OBJECT = "DeleteObjectRequest"
    DELETE_OBJECTS = "DeleteObjectsRequest"
    COPY_OBJECT = "CopyObjectRequest"


class OperationInfo(NamedTuple):
    """Metric tags for a single request."""

    source_bucket: str
    operation: OperationKind


@dataclass(frozen=True)
class S3Request:
    """An outgoing path-style S3 request as seen by the HTTP layer."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def bucket(self) -> str:
        return self._path_parts()[0]

    @property
    def key(self) -> str:
        return self._path_parts()[1]

    @property
    def query(self) -> dict[str, list[str]]:
        return parse_qs(urlsplit(self.url).query, keep_blank_values=True)

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for header_name, value in self.headers.items():
            if header_name.lower() == lowered:
                return value
        return None

    def _path_parts(self) -> tuple[str, str]:
        path = urlsplit(self.url).path.lstrip("/")
        bucket, _, key = path.partition("/")
        return unquote(bucket), unquote(key)


@dataclass(frozen=True)
class RequestTiming:
    """Client-side timing of a request, including retries."""

    client_execute_time_ms: float | None = None
    exception_count: int | None = None


@dataclass(frozen=True)
class PoolStats:
    """Connection pool occupancy right after a request completed."""

    available: int | None = None
    leased: int | None = None
    pending: int | None = None


@dataclass(frozen=True)
class RequestRecord:
    """Everything the collector gets to see about one request."""

    request: S3Request | None
    timing: RequestTiming | None = None
    pool: PoolStats | None = None


def classify(request: S3Request | None) -> OperationInfo | None:
    """
    Maps a request to the operation it performs and the bucket it reads from.

    Copies are tagged with the source bucket. A single-key DELETE is a
    DeleteObjectRequest and a batch `POST ?delete` a DeleteObjectsRequest. Anything that is not a plain
    put, get, list, delete or copy (HEAD probes, bucket listing, bucket
    sub-resources, multipart steps) yields None.
    """
    if request is None:
        return None

    bucket, key = request.bucket, request.key
    if not bucket:
        return None

    method = request.method.upper()
    query = request.query

    if method == "POST":
        if not key and "delete" in query:
            return OperationInfo(bucket, OperationKind.DELETE_OBJECTS)
        return None

    if _SUBRESOURCES.intersection(query):
        return None

    if method == "PUT" and key:
        copy_source = request.header("x-amz-copy-source")
        if copy_source:
            source_bucket = unquote(copy_source).lstrip("/").partition("/")[0]
            return OperationInfo(source_bucket, OperationKind.COPY_OBJECT) if source_bucket else None
        return OperationInfo(bucket, OperationKind.PUT_OBJECT)

    if method == "GET":
        kind = OperationKind.GET_OBJECT if key else OperationKind.LIST_OBJECTS
        return OperationInfo(bucket, kind)

    if method == "DELETE" and key:
        return OperationInfo(bucket, OperationKind.DELETE_OBJECT)

    return None


class PrometheusMetricsCollector(RequestMetricCollector):
    """
    Publishes request metrics to a prometheus_client registry.

    Each metric is extracted on its own; a missing or broken value skips that
    metric only and is never raised to the request being observed.
    """

    def __init__(
        self,
        registry: CollectorRegistry = REGISTRY,
        latency_buckets_ms: tuple[float, ...] = DEFAULT_LATENCY_BUCKETS_MS,
    ):
        self._registry = registry
        self._gauges: dict[str, Gauge] = {}
        self._gauges_lock = threading.Lock()
        self._exception_count = Counter(
            EXCEPTION_COUNT,
            "Failed attempts of storage requests",
            ["bucket", "operation"],
            registry=registry,
        )
        self._latency = Histogram(
            f"{LATENCY_PREFIX}_{CLIENT_EXECUTE_TIME}",
            "Client-side execution time of storage requests in milliseconds",
            ["bucket", "operation"],
            buckets=latency_buckets_ms,
            registry=registry,
        )

    def collect_metrics(self, record: RequestRecord) -> None:
        if record is None:
            return

        pool = record.pool
        if pool is not None:
            self._best_effort(POOL_AVAILABLE, self._set_gauge, POOL_AVAILABLE, pool.available)
            self._best_effort(POOL_LEASED, self._set_gauge, POOL_LEASED, pool.leased)
            self._best_effort(POOL_PENDING, self._set_gauge, POOL_PENDING, pool.pending)

        timing = record.timing
        if record.request is None or timing is None:
            return

        info = self._best_effort("operation_info", classify, record.request)
        if info is None:
            return

        self._best_effort(
            EXCEPTION_COUNT, self._increment_exceptions, info, timing.exception_count
        )
        self._best_effort(LATENCY_PREFIX, self._record_latency, info, timing.client_execute_time_ms)

    def _set_gauge(self, name: str, value: int | None) -> None:
        if value is None:
            return
        gauge = self._gauges.get(name)
        if gauge is None:
            with self._gauges_lock:
                gauge = self._gauges.get(name)
                if gauge is None:
                    gauge = Gauge(name, f"Storage connection pool {name}", registry=self._registry)
                    self._gauges[name] = gauge
        gauge.set(value)

    def _increment_exceptions(self, info: OperationInfo, count: int | None) -> None:
        if count is None:
            return
        self._exception_count.labels(
            bucket=info.source_bucket, operation=info.operation.value
        ).inc(count)

    def _record_latency(self, info: OperationInfo, elapsed_ms: float | None) -> None:
        if elapsed_ms is None:
            return
        self._latency.labels(bucket=info.source_bucket, operation=info.operation.value).observe(
            elapsed_ms
        )

    def _best_effort(self, metric: str, emit: Callable[..., Any], *args: Any) -> Any:
        try:
            return emit(*args)
        except Exception:
            logger.debug("Skipping storage metric", extra={"metric": metric}, exc_info=True)
            return None
