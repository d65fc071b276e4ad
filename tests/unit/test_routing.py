"""Unit tests for SinkDispatcher, the concrete sinks and the sink factory.

Covers fan-out, per-sink failure isolation, REST status handling via
``httpx.MockTransport``, Redis publish via a fake client, and the
structured log line.
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest
import redis

from statsgatherer.config import GathererConfig
from statsgatherer.models.records import StatusRecord
from statsgatherer.models.routing import RoutingProfile, RoutingSink, SinkKind
from statsgatherer.routing.dispatcher import DispatchResult, SinkDispatcher
from statsgatherer.routing.factory import create_sinks
from statsgatherer.routing.sinks import BaseSink, SinkDeliveryError
from statsgatherer.routing.sinks.memory import MemorySink
from statsgatherer.routing.sinks.pubsub import PubSubSink
from statsgatherer.routing.sinks.rest import RestSink
from statsgatherer.routing.sinks.structured_log import StructuredLogSink


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _FailingSink:
    """A sink that always raises."""

    def __init__(self, name: str = "failing_sink") -> None:
        self._name = name
        self.calls = 0

    @property
    def sink_name(self) -> str:
        return self._name

    @property
    def target(self) -> str:
        return "nowhere://"

    def accept(self, record: StatusRecord) -> None:
        self.calls += 1
        raise RuntimeError("Sink failure for testing")


class _FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.published: list[tuple[str, bytes]] = []

    def publish(self, channel: str, message: bytes) -> int:
        if self.fail:
            raise redis.ConnectionError("connection refused")
        self.published.append((channel, message))
        return 2


def _rest_sink(status_code: int, seen: list[httpx.Request] | None = None) -> RestSink:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json={"ok": status_code < 300})

    return RestSink(
        "http://stats.test/api/projects", transport=httpx.MockTransport(handler)
    )


# ---------------------------------------------------------------------------
# Test: SinkDispatcher
# ---------------------------------------------------------------------------


class TestSinkDispatcher:
    """SinkDispatcher must fan out to all sinks, tolerating any failure."""

    def test_dispatch_to_multiple_sinks(self, record):
        sink_a, sink_b = MemorySink("a"), MemorySink("b")
        dispatcher = SinkDispatcher([sink_a, sink_b])

        result = dispatcher.dispatch(record)

        assert result.succeeded == ["a", "b"]
        assert result.delivered
        assert sink_a.records == [record]
        assert sink_b.records == [record]

    def test_middle_sink_failure_is_isolated(self, record):
        first, last = MemorySink("first"), MemorySink("last")
        broken = _FailingSink("middle")
        dispatcher = SinkDispatcher([first, broken, last])

        result = dispatcher.dispatch(record)

        assert result.succeeded == ["first", "last"]
        assert list(result.failed) == ["middle"]
        assert result.partial
        assert len(first.records) == 1
        assert len(last.records) == 1

    def test_all_sinks_fail_does_not_raise(self, record):
        dispatcher = SinkDispatcher([_FailingSink("x"), _FailingSink("y")])
        result = dispatcher.dispatch(record)
        assert result.succeeded == []
        assert set(result.failed) == {"x", "y"}
        assert not result.delivered

    def test_failure_logged_with_sink_identity_and_target(self, record, caplog):
        dispatcher = SinkDispatcher([_FailingSink("rest")])
        with caplog.at_level(logging.WARNING, logger="statsgatherer.routing.dispatcher"):
            dispatcher.dispatch(record)
        assert "rest" in caplog.text
        assert "nowhere://" in caplog.text
        assert "build-pipeline-A" in caplog.text

    def test_no_sinks_returns_empty_result(self, record):
        result = SinkDispatcher().dispatch(record)
        assert isinstance(result, DispatchResult)
        assert result.attempted == 0

    def test_explicit_sinks_override_registered(self, record):
        registered, explicit = MemorySink("registered"), MemorySink("explicit")
        dispatcher = SinkDispatcher([registered])
        dispatcher.dispatch(record, sinks=[explicit])
        assert registered.records == []
        assert explicit.records == [record]

    def test_sinks_attempted_in_registration_order(self, record):
        order: list[str] = []

        class _Recorder(MemorySink):
            def accept(self, rec: StatusRecord) -> None:
                order.append(self.sink_name)

        dispatcher = SinkDispatcher([_Recorder("rest"), _Recorder("pubsub"), _Recorder("log")])
        dispatcher.dispatch(record)
        assert order == ["rest", "pubsub", "log"]

    def test_register_duplicate_ignored(self):
        sink = MemorySink()
        dispatcher = SinkDispatcher()
        dispatcher.register_sink(sink)
        dispatcher.register_sink(sink)
        assert len(dispatcher.registered_sinks) == 1

    def test_unregister_sink(self):
        sink = MemorySink()
        dispatcher = SinkDispatcher([sink])
        dispatcher.unregister_sink(sink)
        dispatcher.unregister_sink(sink)
        assert dispatcher.registered_sinks == []

    def test_failure_log_uses_item_label(self, record, caplog):
        dispatcher = SinkDispatcher([_FailingSink("rest")])
        with caplog.at_level(logging.WARNING, logger="statsgatherer.routing.dispatcher"):
            dispatcher.dispatch(record, item_label="Build Pipeline A")
        assert "Build Pipeline A" in caplog.text

    def test_close_closes_owned_rest_client(self):
        rest = RestSink("http://stats.test/api/projects")
        dispatcher = SinkDispatcher([rest, MemorySink()])
        dispatcher.close()
        assert rest._client.is_closed


# ---------------------------------------------------------------------------
# Test: MemorySink
# ---------------------------------------------------------------------------


class TestMemorySink:
    def test_flush_returns_and_clears_buffer(self, record):
        sink = MemorySink()
        sink.accept(record)
        sink.accept(record)

        assert sink.flush() == [record, record]
        assert sink.records == []
        assert sink.flush() == []


# ---------------------------------------------------------------------------
# Test: RestSink
# ---------------------------------------------------------------------------


class TestRestSink:
    def test_posts_record_json(self, record):
        seen: list[httpx.Request] = []
        sink = _rest_sink(201, seen)

        sink.accept(record)

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://stats.test/api/projects"
        assert request.headers["content-type"] == "application/json"
        body = json.loads(request.content)
        assert body["itemName"] == "build-pipeline-A"
        assert body["status"] == "ACTIVE"

    def test_non_2xx_raises_delivery_error(self, record):
        sink = _rest_sink(500)
        with pytest.raises(SinkDeliveryError) as excinfo:
            sink.accept(record)
        assert excinfo.value.status_code == 500
        assert excinfo.value.sink_name == "rest"
        assert excinfo.value.target == "http://stats.test/api/projects"

    def test_transport_error_raises_delivery_error(self, record):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sink = RestSink("http://stats.test/api", transport=httpx.MockTransport(handler))
        with pytest.raises(SinkDeliveryError, match="connection refused"):
            sink.accept(record)

    def test_protocol_compliance(self):
        sink = _rest_sink(200)
        assert isinstance(sink, BaseSink)
        assert sink.sink_name == "rest"
        sink.close()


# ---------------------------------------------------------------------------
# Test: PubSubSink
# ---------------------------------------------------------------------------


class TestPubSubSink:
    def test_publishes_json_payload(self, record):
        client = _FakeRedis()
        sink = PubSubSink("redis://unused", "projects", client=client)

        sink.accept(record)

        assert len(client.published) == 1
        channel, message = client.published[0]
        assert channel == "projects"
        assert json.loads(message)["itemURL"] == "job/build-pipeline-A/"
        assert sink.last_receiver_count == 2

    def test_redis_error_raises_delivery_error(self, record):
        sink = PubSubSink("redis://unused", "projects", client=_FakeRedis(fail=True))
        with pytest.raises(SinkDeliveryError) as excinfo:
            sink.accept(record)
        assert excinfo.value.sink_name == "pubsub"
        assert excinfo.value.target == "projects"

    def test_builds_client_lazily_from_url(self):
        sink = PubSubSink("redis://localhost:6399/0", "projects", timeout_seconds=0.5)
        assert isinstance(sink, BaseSink)
        assert sink.target == "projects"


# ---------------------------------------------------------------------------
# Test: StructuredLogSink
# ---------------------------------------------------------------------------


class TestStructuredLogSink:
    def test_emits_one_json_line(self, record, caplog):
        sink = StructuredLogSink("statsgatherer.records")
        with caplog.at_level(logging.INFO, logger="statsgatherer.records"):
            sink.accept(record)

        entries = [r for r in caplog.records if r.name == "statsgatherer.records"]
        assert len(entries) == 1
        assert json.loads(entries[0].getMessage())["itemName"] == "build-pipeline-A"
        assert entries[0].status_record["status"] == "ACTIVE"

    def test_target_is_logger_name(self):
        assert StructuredLogSink("custom.records").target == "custom.records"


# ---------------------------------------------------------------------------
# Test: create_sinks
# ---------------------------------------------------------------------------


class TestCreateSinks:
    def test_all_sinks_in_declared_order(self):
        cfg = GathererConfig(
            _env_file=None,
            project_endpoint="http://stats/api",
            pubsub_enabled=True,
            log_sink_enabled=True,
        )
        sinks = create_sinks(cfg)
        assert [s.sink_name for s in sinks] == ["rest", "pubsub", "log"]
        assert sinks[0].target == "http://stats/api"
        assert sinks[1].target == "statsgatherer.projects"

    def test_rest_skipped_without_endpoint(self):
        cfg = GathererConfig(_env_file=None, project_endpoint="", log_sink_enabled=True)
        assert [s.sink_name for s in create_sinks(cfg)] == ["log"]

    def test_profile_options_override_config(self):
        cfg = GathererConfig(_env_file=None, project_endpoint="http://default/api")
        profile = RoutingProfile(
            sinks=[RoutingSink(kind=SinkKind.REST, options={"url": "http://override/api"})]
        )
        sinks = create_sinks(cfg, profile)
        assert [s.target for s in sinks] == ["http://override/api"]

    def test_nothing_enabled(self):
        cfg = GathererConfig(_env_file=None, log_sink_enabled=False)
        assert create_sinks(cfg) == []
