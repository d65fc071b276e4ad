"""Pub/sub sink — publishes each status record to a Redis channel.

The message payload is the record's canonical JSON.  Connection and socket
timeouts bound every publish; Redis errors surface as ``SinkDeliveryError``.
"""

from __future__ import annotations

import logging
from typing import Any

import redis

from statsgatherer.core.hasher import record_json_bytes
from statsgatherer.models.records import StatusRecord
from statsgatherer.routing.sinks import SinkDeliveryError

logger = logging.getLogger(__name__)


class PubSubSink:
    """Publishes records to a Redis pub/sub channel.

    Parameters
    ----------
    url:
        Redis URL, e.g. ``redis://localhost:6379/0``.
    channel:
        Channel the records are published on.
    timeout_seconds:
        Socket connect and read timeout for each publish.
    client:
        Pre-built client exposing ``publish(channel, message)``.  Built
        lazily from *url* when omitted (no connection is opened until the
        first publish).
    """

    def __init__(
        self,
        url: str,
        channel: str,
        timeout_seconds: float = 3.0,
        *,
        client: Any | None = None,
    ) -> None:
        self._channel = channel
        self._client = client if client is not None else redis.Redis.from_url(
            url,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        self.last_receiver_count = 0

    @property
    def sink_name(self) -> str:
        return "pubsub"

    @property
    def target(self) -> str:
        return self._channel

    def accept(self, record: StatusRecord) -> None:
        """Publish the record; raise ``SinkDeliveryError`` on Redis failure."""
        try:
            receivers = self._client.publish(self._channel, record_json_bytes(record))
        except redis.RedisError as exc:
            raise SinkDeliveryError(
                f"publish to {self._channel} failed: {exc}",
                sink_name=self.sink_name,
                target=self._channel,
            ) from exc

        self.last_receiver_count = int(receivers or 0)
        logger.debug(
            "PubSubSink: published %s to %s (%d receivers)",
            record.item_name,
            self._channel,
            self.last_receiver_count,
        )
