"""HTTP fault center publisher."""

import base64
import hashlib
import hmac
import json
import logging
import time

import httpx

from app.models.event import AlertEvent
from app.publishers.base import BasePublisher

logger = logging.getLogger(__name__)


class HttpPublisher(BasePublisher):
    """Forwards events to a fault center HTTP endpoint."""

    def __init__(
        self,
        url: str,
        secret: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._secret = secret or ""
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "http"

    @property
    def enabled(self) -> bool:
        return bool(self._url)

    def _generate_signature(self, timestamp: str, body: bytes) -> str:
        string_to_sign = timestamp.encode("utf-8") + b"\n" + body
        hmac_code = hmac.new(
            self._secret.encode("utf-8"),
            string_to_sign,
            digestmod=hashlib.sha256,
        ).digest()
        return base64.b64encode(hmac_code).decode("utf-8")

    async def publish(self, event: AlertEvent) -> bool:
        body = json.dumps(event.model_dump(mode="json", by_alias=True)).encode("utf-8")
        headers = {"Content-Type": "application/json"}

        if self._secret:
            timestamp = str(int(time.time()))
            headers["X-Inlet-Timestamp"] = timestamp
            headers["X-Inlet-Signature"] = self._generate_signature(timestamp, body)

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(self._url, content=body, headers=headers)
            response.raise_for_status()

        logger.info(f"Event {event.event_id} forwarded to fault center {event.fault_center_id}")
        return True
