"""Host-facing protocols — the narrow surface the gatherer needs from a CI host.

Host boundary
-------------
The orchestration host owns items, authentication and configuration
storage.  The gatherer only reaches them through the protocols below, and
every host value (root URL, identity) arrives as an explicit
``HostContext`` argument rather than through global lookups.

``LocalItem`` and ``StaticIdentity`` are small concrete implementations
used by the CLI and the test-suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class NotConfigurableError(TypeError):
    """Raised when an item cannot hold a configuration (plain container)."""


class ConfigReadError(OSError):
    """Raised by hosts when an item's raw configuration cannot be read."""


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@runtime_checkable
class Item(Protocol):
    """Any host-managed item whose lifecycle is observable."""

    @property
    def name(self) -> str: ...

    @property
    def url(self) -> str: ...

    @property
    def display_name(self) -> str: ...


@runtime_checkable
class ConfigurableItem(Item, Protocol):
    """An item variant capable of holding a configuration."""

    def config_as_string(self) -> str:
        """Return the raw serialized configuration.

        Raises ``OSError`` (or ``ConfigReadError``) when it cannot be read.
        """
        ...


def can_handle(item: object) -> bool:
    """Return ``True`` if *item* belongs to the configurable variant family."""
    return isinstance(item, ConfigurableItem)


def as_configurable(item: object) -> ConfigurableItem:
    """Narrow *item* to ``ConfigurableItem`` or raise ``NotConfigurableError``."""
    if isinstance(item, ConfigurableItem):
        return item
    label = getattr(item, "display_name", None) or repr(item)
    raise NotConfigurableError(
        f"Discarding item {label}/{type(item).__name__} because it cannot "
        "hold a configuration"
    )


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class UserRecord(BaseModel):
    """A resolved host user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    full_name: str


@runtime_checkable
class IdentityContext(Protocol):
    """Current authenticated principal plus user lookup by name."""

    def current_principal(self) -> str | None: ...

    def get_user(self, name: str) -> UserRecord | None: ...


class HostContext:
    """Explicit host values passed into every listener operation.

    Parameters
    ----------
    root_url:
        Root locator of the host instance (becomes ``ciURL``).
    identity:
        Identity context of the acting user.  ``None`` means no
        authentication context is available; user fields stay unset.
    """

    def __init__(
        self, root_url: str, identity: IdentityContext | None = None
    ) -> None:
        self.root_url = root_url
        self.identity = identity

    def __repr__(self) -> str:
        return f"HostContext(root_url={self.root_url!r})"


# ---------------------------------------------------------------------------
# Concrete helpers
# ---------------------------------------------------------------------------


class StaticIdentity:
    """Identity context backed by a fixed principal and user table."""

    def __init__(
        self,
        principal: str | None = None,
        users: dict[str, UserRecord] | None = None,
    ) -> None:
        self._principal = principal
        self._users = dict(users or {})

    def current_principal(self) -> str | None:
        return self._principal

    def get_user(self, name: str) -> UserRecord | None:
        return self._users.get(name)


class LocalItem:
    """A configurable item whose configuration lives in a file on disk.

    Parameters
    ----------
    name:
        The item's identifying name.
    url:
        Host-relative locator.  Defaults to ``job/<name>/``.
    config_path:
        Path to the item's configuration file (usually ``config.xml``).
    """

    def __init__(
        self,
        name: str,
        config_path: Path | str,
        url: str | None = None,
        display_name: str | None = None,
    ) -> None:
        self._name = name
        self._url = url if url is not None else f"job/{name}/"
        self._display_name = display_name or name
        self._config_path = Path(config_path)

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return self._url

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def config_path(self) -> Path:
        return self._config_path

    def config_as_string(self) -> str:
        try:
            return self._config_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigReadError(f"{self._config_path} is not valid UTF-8: {exc}") from exc

    def __repr__(self) -> str:
        return f"LocalItem(name={self._name!r}, config_path={str(self._config_path)!r})"
