from ceph_integration.infrastructure.interfaces.bucket_storage import BucketStorage
from ceph_integration.infrastructure.interfaces.form_data_storage import FormDataStorage
from ceph_integration.infrastructure.interfaces.metric_collector import (
    RequestMetricCollector,
)
from ceph_integration.infrastructure.interfaces.storage import CephService

__all__ = [
    "BucketStorage",
    "CephService",
    "FormDataStorage",
    "RequestMetricCollector",
]
