"""Structured log sink — writes each record as one JSON log line."""

from __future__ import annotations

import logging

from statsgatherer.core.hasher import record_json_bytes
from statsgatherer.models.records import StatusRecord


class StructuredLogSink:
    """Emits records at INFO on a dedicated logger.

    The message is the record's canonical JSON; the payload dict is also
    attached as ``extra={"status_record": ...}`` for handlers that format
    structured fields themselves.
    """

    def __init__(self, logger_name: str = "statsgatherer.records") -> None:
        self._logger = logging.getLogger(logger_name)

    @property
    def sink_name(self) -> str:
        return "log"

    @property
    def target(self) -> str:
        return self._logger.name

    def accept(self, record: StatusRecord) -> None:
        self._logger.info(
            "%s",
            record_json_bytes(record).decode("utf-8"),
            extra={"status_record": record.to_payload()},
        )
