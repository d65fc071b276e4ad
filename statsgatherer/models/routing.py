"""Routing models — the statically declared set of record sinks."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class SinkKind(str, Enum):
    """Kinds of sink the gatherer knows how to build."""

    REST = "rest"
    PUBSUB = "pubsub"
    LOG = "log"


class RoutingSink(BaseModel):
    """A single sink entry in the routing profile.

    ``options`` carries per-sink overrides (e.g. ``{"timeout_seconds": 1.0}``)
    applied on top of the process configuration.
    """

    model_config = ConfigDict(frozen=True)

    kind: SinkKind
    options: dict[str, Any] = {}
    enabled: bool = True


class RoutingProfile(BaseModel):
    """Ordered set of sinks that receive every status record.

    Sinks are attempted in list order for each event.  Order carries no
    delivery guarantee across sinks; it only fixes the attempt sequence.
    """

    model_config = ConfigDict(frozen=True)

    sinks: list[RoutingSink] = [
        RoutingSink(kind=SinkKind.REST),
        RoutingSink(kind=SinkKind.PUBSUB),
        RoutingSink(kind=SinkKind.LOG),
    ]

    def enabled_sinks(self) -> list[RoutingSink]:
        """Return the enabled entries, preserving declared order."""
        return [s for s in self.sinks if s.enabled]
