"""
Account identity for the sync response cache.

The store only needs a stable user ID to pick the cache location. It is
handed a :class:`Credentials` value directly or asks an
:class:`IdentityProvider` for one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import IdentityError

_FORBIDDEN_COMPONENTS = frozenset({".", ".."})
_FORBIDDEN_CHARACTERS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class Credentials:
    """The account a cache belongs to.

    Attributes:
        user_id: Matrix user ID, e.g. ``@alice:example.org``
        device_id: Device ID of this client session
        homeserver: Homeserver base URL
    """

    user_id: str | None
    device_id: str | None = None
    homeserver: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "user_id": self.user_id,
            "device_id": self.device_id,
            "homeserver": self.homeserver,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        """Deserialize from dictionary."""
        return cls(
            user_id=data.get("user_id"),
            device_id=data.get("device_id"),
            homeserver=data.get("homeserver"),
        )


def validate_user_id(user_id: str | None) -> str:
    """Check that a user ID can name a cache folder.

    Returns:
        The user ID unchanged

    Raises:
        IdentityError: If the ID is missing, blank, or not a single path component
    """
    if user_id is None:
        raise IdentityError("credentials must provide a user identifier")
    if not isinstance(user_id, str) or not user_id.strip():
        raise IdentityError("user identifier is empty", str(user_id))
    if user_id in _FORBIDDEN_COMPONENTS or any(c in user_id for c in _FORBIDDEN_CHARACTERS):
        raise IdentityError("user identifier is not a valid path component", user_id)
    return user_id


class IdentityProvider(ABC):
    """Source of the credentials the store is opened with."""

    @abstractmethod
    async def get_credentials(self) -> Credentials:
        """Get the credentials of the current account.

        Raises:
            IdentityError: If no account is configured
        """
        ...


class StaticIdentityProvider(IdentityProvider):
    """Provider returning fixed credentials."""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    async def get_credentials(self) -> Credentials:
        return self._credentials


class ConfigFileIdentityProvider(IdentityProvider):
    """Provider that reads credentials from a local YAML file.

    ```yaml
    identity:
      user_id: "@alice:example.org"
      device_id: "ABCDEFGH"
      homeserver: "https://matrix.example.org"
    ```
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self._credentials: Credentials | None = None

    async def get_credentials(self) -> Credentials:
        """Load credentials, caching them after the first successful read."""
        if self._credentials is not None:
            return self._credentials

        section = self._load_config().get("identity") or {}
        if not isinstance(section, dict) or not section.get("user_id"):
            raise IdentityError(f"no user_id configured in {self.config_path}")

        self._credentials = Credentials.from_dict(section)
        return self._credentials

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            content = yaml.safe_load(self.config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            return {}
        return content if isinstance(content, dict) else {}
