"""Builds the statically configured sink set from process configuration."""

from __future__ import annotations

import logging

from statsgatherer.config import GathererConfig
from statsgatherer.models.routing import RoutingProfile, RoutingSink, SinkKind
from statsgatherer.routing.sinks import BaseSink
from statsgatherer.routing.sinks.pubsub import PubSubSink
from statsgatherer.routing.sinks.rest import RestSink
from statsgatherer.routing.sinks.structured_log import StructuredLogSink

logger = logging.getLogger(__name__)


def _build_sink(entry: RoutingSink, cfg: GathererConfig) -> BaseSink | None:
    opts = entry.options
    if entry.kind == SinkKind.REST:
        url = opts.get("url", cfg.project_endpoint)
        if not url:
            logger.debug("REST sink skipped: no project endpoint configured")
            return None
        return RestSink(url, opts.get("timeout_seconds", cfg.rest_timeout_seconds))

    if entry.kind == SinkKind.PUBSUB:
        if not cfg.pubsub_enabled:
            return None
        return PubSubSink(
            opts.get("url", cfg.pubsub_url),
            opts.get("channel", cfg.pubsub_channel),
            opts.get("timeout_seconds", cfg.pubsub_timeout_seconds),
        )

    if entry.kind == SinkKind.LOG:
        if not cfg.log_sink_enabled:
            return None
        return StructuredLogSink(opts.get("logger_name", cfg.record_logger_name))

    raise ValueError(f"Unknown sink kind: {entry.kind!r}")


def create_sinks(
    cfg: GathererConfig, profile: RoutingProfile | None = None
) -> list[BaseSink]:
    """Instantiate the enabled sinks of *profile* in declared order.

    A REST entry is skipped when no endpoint is configured, a pub/sub entry
    when ``pubsub_enabled`` is false, and a log entry when
    ``log_sink_enabled`` is false.
    """
    profile = profile or RoutingProfile()
    sinks: list[BaseSink] = []
    for entry in profile.enabled_sinks():
        sink = _build_sink(entry, cfg)
        if sink is not None:
            sinks.append(sink)
    return sinks
