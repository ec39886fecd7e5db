from __future__ import annotations

import logging
from typing import Any, Final, Optional

import requests

from scaler.domain.capacity import Capacity
from scaler.domain.capacity_requester import CapacityRequester
from scaler.domain.errors import CapacityRequestError

logger = logging.getLogger(__name__)


class SpannerAdminClient(CapacityRequester):
    """Changes instance capacity through the Cloud Spanner instance admin REST API."""

    DEFAULT_BASE_URL: Final[str] = "https://spanner.googleapis.com/v1"

    def __init__(
            self,
            base_url: str = DEFAULT_BASE_URL,
            access_token: Optional[str] = None,
            timeout: float = 10.0,
    ) -> None:
        self.base = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @staticmethod
    def update_body(capacity: Capacity) -> dict[str, Any]:
        return {
            "instance": {capacity.field_name: capacity.size},
            "fieldMask": capacity.field_name,
        }

    def resize(self, instance_key: str, capacity: Capacity) -> str:
        url = f"{self.base}/{instance_key}"

        try:
            r = requests.patch(url, json=self.update_body(capacity), headers=self._headers(), timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise CapacityRequestError(f"Spanner refused resize of {instance_key} to {capacity}") from exc

        try:
            data: dict[str, Any] = r.json()
            operation = data["name"]
        except (KeyError, TypeError, ValueError) as exc:
            raise CapacityRequestError(f"Invalid Spanner response for {instance_key}: {r.text}") from exc

        logger.info(f"Cloud Spanner started the scaling operation: {operation}")
        return operation
