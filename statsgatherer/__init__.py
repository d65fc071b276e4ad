"""Statsgatherer: item lifecycle telemetry for CI hosts.

Observes create / update / delete events of host-managed items, builds a
normalized ``StatusRecord`` per event and fans it out to independent sinks:
  - REST endpoint (httpx, bounded timeout)
  - Redis pub/sub channel
  - Structured log line on the ``statsgatherer.records`` logger

A failing sink never blocks the others, and no failure ever escapes the
listener into the host's own lifecycle operation.
"""

__version__ = "0.2.0"
__author__ = "Statsgatherer Contributors"
__description__ = "Item lifecycle status records fanned out to telemetry sinks"

from statsgatherer.listeners.item_listener import ItemStatsListener
from statsgatherer.models.records import ItemStatus, StatusRecord
from statsgatherer.routing.dispatcher import SinkDispatcher

__all__ = [
    "ItemStatsListener",
    "ItemStatus",
    "StatusRecord",
    "SinkDispatcher",
    "__version__",
]
