"""SinkDispatcher — fans each status record out to every configured sink.

Sinks are attempted in registration order.  Each attempt is isolated: a
failure is logged with the sink's name and target, recorded in the
``DispatchResult``, and delivery continues with the next sink.  There are
no retries, no backoff and no queueing; a dispatch is best-effort and
completes before ``dispatch`` returns.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from statsgatherer.models.records import StatusRecord

if TYPE_CHECKING:
    from statsgatherer.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class DispatchResult(BaseModel):
    """Outcome of one record dispatch across all sinks."""

    model_config = ConfigDict(frozen=True)

    item_name: str
    succeeded: list[str] = []
    failed: dict[str, str] = {}

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def delivered(self) -> bool:
        """``True`` if at least one sink was attempted and none failed."""
        return bool(self.succeeded) and not self.failed

    @property
    def partial(self) -> bool:
        """``True`` if some sinks succeeded and some failed."""
        return bool(self.succeeded) and bool(self.failed)


class SinkDispatcher:
    """Routes status records to ALL configured sinks.

    A failure in one sink does not block the others, and ``dispatch``
    never raises for sink failures.

    Usage
    -----
    >>> dispatcher = SinkDispatcher()
    >>> dispatcher.register_sink(rest_sink)
    >>> dispatcher.register_sink(log_sink)
    >>> result = dispatcher.dispatch(record)
    """

    def __init__(self, sinks: Sequence[BaseSink] = ()) -> None:
        self._sinks: list[BaseSink] = []
        for sink in sinks:
            self.register_sink(sink)

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def register_sink(self, sink: BaseSink) -> None:
        """Register a sink to receive dispatched records.

        Sinks are called in registration order.  Duplicate registration
        of the same sink instance is silently ignored.
        """
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.info("Registered sink: %s -> %s", sink.sink_name, sink.target)

    def unregister_sink(self, sink: BaseSink) -> None:
        """Remove a previously registered sink."""
        try:
            self._sinks.remove(sink)
            logger.info("Unregistered sink: %s", sink.sink_name)
        except ValueError:
            pass

    @property
    def registered_sinks(self) -> list[BaseSink]:
        """Return a copy of the registered sink list."""
        return list(self._sinks)

    def close(self) -> None:
        """Close every registered sink that holds a connection."""
        for sink in self._sinks:
            close = getattr(sink, "close", None)
            if callable(close):
                close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        record: StatusRecord,
        sinks: Sequence[BaseSink] | None = None,
        item_label: str | None = None,
    ) -> DispatchResult:
        """Deliver *record* to every sink, isolating failures per sink.

        Parameters
        ----------
        record:
            The immutable record to deliver.  Every sink receives the same
            frozen instance.
        sinks:
            Explicit sinks for this call.  Defaults to the registered set.
        item_label:
            Item display name used in failure logs.  Defaults to the
            record's item name.

        Returns
        -------
        DispatchResult
            Names of the sinks that accepted the record and, for each
            failing sink, its error message.
        """
        label = item_label or record.item_name
        targets = list(self._sinks if sinks is None else sinks)
        if not targets:
            logger.warning("No sinks configured — record for %s dropped", label)
            return DispatchResult(item_name=record.item_name)

        succeeded: list[str] = []
        failed: dict[str, str] = {}

        for sink in targets:
            try:
                sink.accept(record)
                succeeded.append(sink.sink_name)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Sink %s failed to deliver record for %s to %s: %s",
                    sink.sink_name,
                    label,
                    sink.target,
                    exc,
                )
                failed[sink.sink_name] = str(exc)

        if failed:
            logger.warning(
                "Record for %s: %d/%d sinks succeeded, %d failed",
                label,
                len(succeeded),
                len(targets),
                len(failed),
            )

        return DispatchResult(
            item_name=record.item_name, succeeded=succeeded, failed=failed
        )
