"""RecordBuilder — assembles a StatusRecord from item, user and config state.

Identity comes from the explicit ``HostContext``; nothing is looked up from
global host state.  Missing pieces degrade gracefully:

* an unresolvable acting user leaves ``user_id`` / ``user_name`` unset
  (not an error);
* an unreadable configuration leaves ``config_content`` unset and logs a
  single warning.

Neither case aborts the record.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from statsgatherer.host import ConfigurableItem, HostContext, UserRecord
from statsgatherer.models.records import ItemStatus, StatusRecord

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


class RecordBuilder:
    """Builds immutable status records for a single item event.

    Parameters
    ----------
    clock:
        Callable returning the current time.  Defaults to UTC wall time;
        tests pass a fixed clock.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def read_config(self, item: ConfigurableItem) -> str | None:
        """Return the item's raw configuration, or ``None`` if unreadable."""
        try:
            return item.config_as_string()
        except (OSError, UnicodeError) as exc:
            logger.warning(
                "Failed to read configuration for %s: %s", item.display_name, exc
            )
            return None

    def resolve_user(self, context: HostContext) -> UserRecord | None:
        """Resolve the acting user from the host identity context.

        Returns ``None`` when there is no identity context, no current
        principal, or no user record for the principal.
        """
        identity = context.identity
        if identity is None:
            return None
        principal = identity.current_principal()
        if not principal:
            return None
        user = identity.get_user(principal)
        if user is None:
            logger.debug("No user record for principal %s", principal)
        return user

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(
        self,
        item: ConfigurableItem,
        context: HostContext,
        *,
        status: ItemStatus,
        config_content: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> StatusRecord:
        """Assemble a fully populated record in one step.

        Exactly one of *created_at* / *updated_at* must be given; the model
        rejects anything else.
        """
        user = self.resolve_user(context)
        return StatusRecord(
            item_name=item.name,
            item_url=item.url,
            ci_url=context.root_url,
            user_id=user.user_id if user else None,
            user_name=user.full_name if user else None,
            config_content=config_content,
            created_at=created_at,
            updated_at=updated_at,
            status=status,
        )
