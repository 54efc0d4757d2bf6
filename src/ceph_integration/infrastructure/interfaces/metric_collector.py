"""Abstract interface for per-request metric collection."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ceph_integration.metrics import RequestRecord


class RequestMetricCollector(ABC):
    """Receives one record per completed store request."""

    @abstractmethod
    def collect_metrics(self, record: "RequestRecord") -> None:
        """
        Extracts metrics from a completed request.

        Implementations run inline with the request and must never raise.

        Args:
            record: Request, timing and connection pool snapshot.
        """
        pass
