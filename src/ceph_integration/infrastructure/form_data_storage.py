"""Form documents stored as JSON in a fixed bucket."""

import logging
from collections.abc import Iterable

from pydantic import ValidationError

from ceph_integration.exceptions import MalformedContentError
from ceph_integration.infrastructure.interfaces import CephService, FormDataStorage
from ceph_integration.models import FormData

logger = logging.getLogger(__name__)


class JsonFormDataStorage(FormDataStorage):
    """Serializes form documents to JSON on top of a CephService."""

    def __init__(self, ceph_service: CephService, bucket_name: str):
        self._ceph_service = ceph_service
        self._bucket_name = bucket_name

    def get_form_data(self, key: str) -> FormData | None:
        content = self._ceph_service.get_as_string(self._bucket_name, key)
        if content is None:
            return None
        try:
            return FormData.model_validate_json(content)
        except ValidationError as e:
            logger.exception(
                "Form data deserialization failed",
                extra={"bucket_name": self._bucket_name, "object_name": key},
            )
            raise MalformedContentError(key, cause=e) from e

    def put_form_data(self, key: str, form_data: FormData) -> None:
        self._ceph_service.put_content(self._bucket_name, key, form_data.to_json())

    def delete_form_data(self, keys: Iterable[str]) -> None:
        self._ceph_service.delete(self._bucket_name, keys)

    def exist(self, key: str) -> bool:
        return self._ceph_service.exist(self._bucket_name, key)
