"""Sink protocol for status record routing.

All sinks implement the ``BaseSink`` protocol: ``sink_name`` and ``target``
properties and an ``accept(record)`` method.  The dispatcher calls
``accept`` on every sink for every dispatched record.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from statsgatherer.models.records import StatusRecord


class SinkDeliveryError(RuntimeError):
    """Raised by a sink when a record could not be delivered.

    Attributes
    ----------
    sink_name:
        Name of the failing sink.
    target:
        Address the sink was delivering to (URL, channel ...).
    status_code:
        HTTP status for REST failures, otherwise ``None``.
    """

    def __init__(
        self,
        message: str,
        *,
        sink_name: str,
        target: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.sink_name = sink_name
        self.target = target
        self.status_code = status_code


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every record sink must implement.

    Attributes
    ----------
    sink_name : str
        A unique human-readable identifier (e.g. ``"rest"``, ``"pubsub"``).
    target : str
        The address the sink delivers to, used in failure logs.
    """

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    @property
    def target(self) -> str:
        """Return the delivery address of this sink."""
        ...

    def accept(self, record: StatusRecord) -> None:
        """Deliver a record.

        Raise ``SinkDeliveryError`` (or any exception) on failure; the
        dispatcher logs it and moves on to the next sink.
        """
        ...
