"""REST sink — POSTs each status record as JSON to a configured endpoint.

Transport errors, timeouts and non-2xx responses all surface as
``SinkDeliveryError``.  Each request is bounded by the client timeout so
an unresponsive endpoint cannot stall the listener indefinitely.
"""

from __future__ import annotations

import logging

import httpx

from statsgatherer.core.hasher import record_json_bytes
from statsgatherer.models.records import StatusRecord
from statsgatherer.routing.sinks import SinkDeliveryError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class RestSink:
    """Delivers records to a REST endpoint with a single POST each.

    Parameters
    ----------
    url:
        Absolute endpoint URL.
    timeout_seconds:
        Per-request timeout covering connect, read and write.
    client:
        Pre-built ``httpx.Client``.  When given, the sink does not close it.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 3.0,
        *,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            headers=JSON_HEADERS,
            transport=transport,
        )

    @property
    def sink_name(self) -> str:
        return "rest"

    @property
    def target(self) -> str:
        return self._url

    def accept(self, record: StatusRecord) -> None:
        """POST the record; raise ``SinkDeliveryError`` unless the reply is 2xx."""
        try:
            response = self._client.post(
                self._url,
                content=record_json_bytes(record),
                headers=JSON_HEADERS,
            )
        except httpx.HTTPError as exc:
            raise SinkDeliveryError(
                f"POST {self._url} failed: {exc}",
                sink_name=self.sink_name,
                target=self._url,
            ) from exc

        if not response.is_success:
            raise SinkDeliveryError(
                f"POST {self._url} returned HTTP {response.status_code}",
                sink_name=self.sink_name,
                target=self._url,
                status_code=response.status_code,
            )
        logger.debug(
            "RestSink: posted %s to %s (HTTP %d)",
            record.item_name,
            self._url,
            response.status_code,
        )

    def close(self) -> None:
        """Close the underlying client when this sink created it."""
        if self._owns_client:
            self._client.close()
