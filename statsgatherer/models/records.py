"""Status record model — one normalized observation of an item lifecycle event.

Each record is a frozen Pydantic model built fresh per event.  It has no
persistent identity: the listener call that built it owns it, hands it to
every sink, and drops it once the dispatch attempts complete.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ItemStatus(str, Enum):
    """Operational status reported for an item."""

    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"
    DELETED = "DELETED"


class ItemEvent(str, Enum):
    """The three host lifecycle transitions the listener observes."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class StatusRecord(BaseModel):
    """Normalized telemetry snapshot for a single item event.

    Field names follow Python conventions; the JSON wire names are the
    camelCase aliases (``itemName``, ``itemURL``, ``ciURL`` ...).  Optional
    fields stay ``None`` when the value could not be resolved and are left
    out of serialized payloads.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> record = StatusRecord(
    ...     item_name="build-pipeline-A",
    ...     item_url="job/build-pipeline-A/",
    ...     ci_url="https://ci.example.com/",
    ...     status=ItemStatus.ACTIVE,
    ...     created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    ... )
    >>> record.to_payload()["itemName"]
    'build-pipeline-A'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    item_name: str = Field(alias="itemName")
    item_url: str = Field(alias="itemURL")
    ci_url: str = Field(alias="ciURL")
    user_id: str | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    config_content: str | None = Field(default=None, alias="configContent")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    status: ItemStatus

    @model_validator(mode="after")
    def check_one_timestamp(self) -> StatusRecord:
        if (self.created_at is None) == (self.updated_at is None):
            raise ValueError(
                "exactly one of created_at / updated_at must be set"
            )
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready dict sent to sinks (camelCase, no unset fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
