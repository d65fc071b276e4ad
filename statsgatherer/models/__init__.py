"""Statsgatherer data models — all Pydantic v2, all frozen (immutable)."""

from statsgatherer.models.records import ItemEvent, ItemStatus, StatusRecord
from statsgatherer.models.routing import RoutingProfile, RoutingSink, SinkKind

__all__ = [
    # records
    "ItemEvent",
    "ItemStatus",
    "StatusRecord",
    # routing
    "RoutingProfile",
    "RoutingSink",
    "SinkKind",
]
