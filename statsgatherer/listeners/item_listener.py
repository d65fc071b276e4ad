"""ItemStatsListener — turns host item lifecycle events into status records.

Entry operations
----------------
``on_created`` / ``on_updated`` / ``on_deleted`` are called by the host on
its own thread, once per lifecycle transition.  Each one:

1. returns immediately unless the ``project_info_enabled`` flag is set and
   the item can hold a configuration;
2. builds a fresh, frozen ``StatusRecord``;
3. hands it to the ``SinkDispatcher``, which isolates sink failures.

Whatever goes wrong inside, the host never sees an exception: failures are
logged at WARNING with the item's display name and the REST endpoint.
"""

from __future__ import annotations

import logging

from statsgatherer.config import GathererConfig
from statsgatherer.config import config as default_config
from statsgatherer.core.config_inspector import is_disabled
from statsgatherer.core.record_builder import RecordBuilder
from statsgatherer.host import (
    ConfigurableItem,
    HostContext,
    Item,
    as_configurable,
    can_handle,
)
from statsgatherer.models.records import ItemEvent, ItemStatus, StatusRecord
from statsgatherer.routing.dispatcher import DispatchResult, SinkDispatcher
from statsgatherer.routing.factory import create_sinks

logger = logging.getLogger(__name__)


class ItemStatsListener:
    """Publishes a status record for every create / update / delete event.

    Parameters
    ----------
    config:
        Feature flag and endpoint source.  Defaults to the process-wide
        ``statsgatherer.config.config``.
    dispatcher:
        Sink fan-out.  Defaults to a dispatcher over ``create_sinks(config)``.
    builder:
        Record builder.  Tests inject one with a fixed clock.
    """

    def __init__(
        self,
        config: GathererConfig | None = None,
        dispatcher: SinkDispatcher | None = None,
        builder: RecordBuilder | None = None,
    ) -> None:
        self._config = config or default_config
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or SinkDispatcher(create_sinks(self._config))
        self._builder = builder or RecordBuilder()

    @property
    def dispatcher(self) -> SinkDispatcher:
        return self._dispatcher

    def close(self) -> None:
        """Close the sinks of the dispatcher this listener built itself."""
        if self._owns_dispatcher:
            self._dispatcher.close()

    def __enter__(self) -> ItemStatsListener:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Host entry points
    # ------------------------------------------------------------------

    def on_created(self, item: Item, context: HostContext) -> DispatchResult | None:
        return self._handle(ItemEvent.CREATED, item, context)

    def on_updated(self, item: Item, context: HostContext) -> DispatchResult | None:
        return self._handle(ItemEvent.UPDATED, item, context)

    def on_deleted(self, item: Item, context: HostContext) -> DispatchResult | None:
        return self._handle(ItemEvent.DELETED, item, context)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def accepts(self, item: object) -> bool:
        """Whether an event for *item* would be processed at all."""
        return self._config.project_info_enabled and can_handle(item)

    def _handle(
        self, event: ItemEvent, item: Item, context: HostContext
    ) -> DispatchResult | None:
        if not self.accepts(item):
            return None
        try:
            record = self.build_record(event, as_configurable(item), context)
            return self._dispatcher.dispatch(record, item_label=item.display_name)
        except Exception as exc:  # noqa: BLE001
            self._log_failure(event, item, exc)
            return None

    def build_record(
        self, event: ItemEvent, item: ConfigurableItem, context: HostContext
    ) -> StatusRecord:
        """Build the record for *event* without dispatching it."""
        builder = self._builder

        if event == ItemEvent.CREATED:
            return builder.build(
                item,
                context,
                status=ItemStatus.ACTIVE,
                config_content=builder.read_config(item),
                created_at=builder.now(),
            )

        if event == ItemEvent.UPDATED:
            # Read once; the inspector and the record see the same snapshot.
            config_content = builder.read_config(item)
            disabled = config_content is not None and is_disabled(
                config_content, item.display_name
            )
            return builder.build(
                item,
                context,
                status=ItemStatus.DISABLED if disabled else ItemStatus.ACTIVE,
                config_content=config_content,
                updated_at=builder.now(),
            )

        # Deleted: the item is going away, its configuration is not attached.
        return builder.build(
            item,
            context,
            status=ItemStatus.DELETED,
            updated_at=builder.now(),
        )

    def _log_failure(self, event: ItemEvent, item: object, exc: Exception) -> None:
        label = getattr(item, "display_name", None) or repr(item)
        logger.warning(
            "Failed to call API %s for item %s (%s event): %s",
            self._config.project_endpoint or "<no endpoint>",
            label,
            event.value,
            exc,
            exc_info=exc,
        )
