"""urllib3 pool manager that reports every store request to a metric collector."""

import logging
import threading
import time
from typing import Any

import urllib3

from ceph_integration.infrastructure.interfaces import RequestMetricCollector
from ceph_integration.metrics import PoolStats, RequestRecord, RequestTiming, S3Request

logger = logging.getLogger(__name__)


class MetricsPoolManager(urllib3.PoolManager):
    """
    PoolManager handed to `Minio(http_client=...)`.

    Times each `urlopen` call (urllib3 retries included), counts failed
    attempts and snapshots the connection pool, then passes the record to the
    collector. Collector failures are swallowed so the request outcome is
    never affected.
    """

    def __init__(self, collector: RequestMetricCollector | None = None, **kwargs: Any):
        super().__init__(**kwargs)
        self._collector = collector
        self._in_flight = 0
        self._in_flight_lock = threading.Lock()

    def urlopen(self, method: str, url: str, redirect: bool = True, **kw: Any):
        if self._collector is None:
            return super().urlopen(method, url, redirect=redirect, **kw)

        request = S3Request(method=method, url=url, headers=dict(kw.get("headers") or {}))
        with self._in_flight_lock:
            self._in_flight += 1

        response = None
        started = time.perf_counter()
        try:
            response = super().urlopen(method, url, redirect=redirect, **kw)
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            with self._in_flight_lock:
                self._in_flight -= 1
                in_flight = self._in_flight
            self._report(request, response, elapsed_ms, in_flight)

    def _report(self, request: S3Request, response, elapsed_ms: float, in_flight: int) -> None:
        try:
            record = RequestRecord(
                request=request,
                timing=RequestTiming(
                    client_execute_time_ms=elapsed_ms,
                    exception_count=failed_attempts(response),
                ),
                pool=self._pool_stats(request.url, in_flight),
            )
            self._collector.collect_metrics(record)
        except Exception:
            logger.debug("Request metrics collection failed", exc_info=True)

    def _pool_stats(self, url: str, in_flight: int) -> PoolStats | None:
        pool = self.connection_from_url(url)
        queue = pool.pool
        if queue is None:
            return None
        # Slots hold None until a connection has been created for them
        idle = sum(1 for conn in list(queue.queue) if conn is not None)
        leased = queue.maxsize - queue.qsize()
        return PoolStats(available=idle, leased=leased, pending=max(0, in_flight - leased))


def failed_attempts(response) -> int:
    """
    Counts failed attempts behind a response.

    Retried errors and retried error statuses are read from urllib3's retry
    history; the final outcome adds one when it is a 4xx/5xx status. No
    response at all means the request raised.
    """
    if response is None:
        return 1

    count = 0
    retries = getattr(response, "retries", None)
    if retries is not None:
        count += sum(
            1
            for attempt in retries.history
            if attempt.error is not None or (attempt.status or 0) >= 400
        )
    if response.status >= 400:
        count += 1
    return count
