"""In-memory sink — buffers records for inspection (dev tooling and tests)."""

from __future__ import annotations

from statsgatherer.models.records import StatusRecord


class MemorySink:
    """Collects every accepted record in a local buffer.

    Call ``flush()`` to retrieve and clear the buffered records.
    """

    def __init__(self, name: str = "memory") -> None:
        self._name = name
        self._records: list[StatusRecord] = []

    @property
    def sink_name(self) -> str:
        return self._name

    @property
    def target(self) -> str:
        return f"memory://{self._name}"

    def accept(self, record: StatusRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> list[StatusRecord]:
        return list(self._records)

    def flush(self) -> list[StatusRecord]:
        """Return and clear all buffered records."""
        records = list(self._records)
        self._records.clear()
        return records
