"""Shared test fixtures for Statsgatherer."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from statsgatherer.config import GathererConfig
from statsgatherer.core.record_builder import RecordBuilder
from statsgatherer.host import HostContext, StaticIdentity, UserRecord
from statsgatherer.models.records import ItemStatus, StatusRecord

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

ENABLED_XML = (
    "<?xml version='1.1' encoding='UTF-8'?>\n"
    "<project>\n"
    "  <description>nightly build</description>\n"
    "  <disabled>false</disabled>\n"
    "  <builders/>\n"
    "</project>\n"
)

DISABLED_XML = (
    "<?xml version='1.1' encoding='UTF-8'?>\n"
    "<project>\n"
    "  <description>nightly build</description>\n"
    "  <disabled>true</disabled>\n"
    "</project>\n"
)


# ---------------------------------------------------------------------------
# Fake host items
# ---------------------------------------------------------------------------


class FakeItem:
    """A configurable host item with an in-memory config."""

    def __init__(
        self,
        name: str = "build-pipeline-A",
        config_xml: str | None = ENABLED_XML,
        url: str | None = None,
    ) -> None:
        self.name = name
        self.url = url if url is not None else f"job/{name}/"
        self.display_name = name
        self.config_xml = config_xml
        self.config_reads = 0

    def config_as_string(self) -> str:
        self.config_reads += 1
        if self.config_xml is None:
            raise OSError(f"config.xml missing for {self.name}")
        return self.config_xml


class ContainerItem:
    """A plain container (folder-like) item that cannot hold a configuration."""

    def __init__(self, name: str = "team-folder") -> None:
        self.name = name
        self.url = f"job/{name}/"
        self.display_name = name


@pytest.fixture
def make_item() -> Callable[..., FakeItem]:
    """Factory fixture: build a configurable FakeItem."""
    return FakeItem


@pytest.fixture
def item() -> FakeItem:
    return FakeItem()


@pytest.fixture
def container_item() -> ContainerItem:
    return ContainerItem()


# ---------------------------------------------------------------------------
# Host context, config, builder
# ---------------------------------------------------------------------------


@pytest.fixture
def identity() -> StaticIdentity:
    """Identity context where 'alice' is logged in and known."""
    return StaticIdentity(
        principal="alice",
        users={"alice": UserRecord(user_id="alice", full_name="Alice Liddell")},
    )


@pytest.fixture
def context(identity: StaticIdentity) -> HostContext:
    return HostContext(root_url="https://ci.example.com/", identity=identity)


@pytest.fixture
def enabled_config() -> GathererConfig:
    """Config with the feature flag on and only the REST endpoint set."""
    return GathererConfig(
        _env_file=None,
        project_info_enabled=True,
        project_endpoint="http://stats.test/api/projects",
        pubsub_enabled=False,
        log_sink_enabled=False,
    )


@pytest.fixture
def disabled_config(enabled_config: GathererConfig) -> GathererConfig:
    return enabled_config.model_copy(update={"project_info_enabled": False})


@pytest.fixture
def builder() -> RecordBuilder:
    """RecordBuilder with a fixed clock."""
    return RecordBuilder(clock=lambda: FIXED_NOW)


@pytest.fixture
def make_record() -> Callable[..., StatusRecord]:
    """Factory fixture: build a StatusRecord with sensible defaults."""

    def _factory(**overrides: Any) -> StatusRecord:
        defaults: dict[str, Any] = {
            "item_name": "build-pipeline-A",
            "item_url": "job/build-pipeline-A/",
            "ci_url": "https://ci.example.com/",
            "status": ItemStatus.ACTIVE,
            "created_at": FIXED_NOW,
        }
        defaults.update(overrides)
        return StatusRecord(**defaults)

    return _factory


@pytest.fixture
def record(make_record: Callable[..., StatusRecord]) -> StatusRecord:
    """Convenience: a ready-made StatusRecord with test defaults."""
    return make_record()


@pytest.fixture
def enabled_xml() -> str:
    return ENABLED_XML


@pytest.fixture
def disabled_xml() -> str:
    return DISABLED_XML
