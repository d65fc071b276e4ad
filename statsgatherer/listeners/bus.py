"""Item event bus — the registration point between a host and its listeners.

A host registers listeners once and calls ``fire`` for every item
lifecycle transition.  Each listener implements the three entry operations
of the ``ItemListener`` protocol.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from statsgatherer.host import HostContext
from statsgatherer.models.records import ItemEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class ItemListener(Protocol):
    """Capability interface a listener registers with the host."""

    def on_created(self, item: Any, context: HostContext) -> Any: ...

    def on_updated(self, item: Any, context: HostContext) -> Any: ...

    def on_deleted(self, item: Any, context: HostContext) -> Any: ...


class ItemEventBus:
    """Routes host item events to every registered listener.

    Listeners are invoked in registration order.  A listener that raises
    is logged and skipped; the remaining listeners still run and ``fire``
    itself never raises.
    """

    def __init__(self) -> None:
        self._listeners: list[ItemListener] = []

    def register(self, listener: ItemListener) -> None:
        """Register *listener*.  Duplicate registration is ignored."""
        if not isinstance(listener, ItemListener):
            raise TypeError(
                f"{type(listener).__name__} does not implement ItemListener"
            )
        if listener not in self._listeners:
            self._listeners.append(listener)
            logger.info("Registered item listener: %s", type(listener).__name__)

    def unregister(self, listener: ItemListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listeners(self) -> list[ItemListener]:
        return list(self._listeners)

    def fire(self, event: ItemEvent, item: Any, context: HostContext) -> int:
        """Deliver *event* to all listeners; return how many ran cleanly."""
        clean = 0
        for listener in self._listeners:
            handler = getattr(listener, f"on_{event.value}")
            try:
                handler(item, context)
                clean += 1
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Listener %s failed on %s event",
                    type(listener).__name__,
                    event.value,
                )
        return clean
