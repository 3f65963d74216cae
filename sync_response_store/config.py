"""
Store configuration.

Configuration is immutable and handed to the store at construction. It
decides where cache files live and which list rule merging uses.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import FILE_NAME, FOLDER_NAME
from .merge import ListMergePolicy

logger = logging.getLogger(__name__)

DEFAULT_LIST_MERGE = ListMergePolicy.APPEND


def default_cache_dir() -> Path:
    """Per-user cache directory: ``$XDG_CACHE_HOME`` or ``~/.cache``."""
    cache_home = os.environ.get("XDG_CACHE_HOME") or os.path.expanduser("~/.cache")
    return Path(cache_home)


def _parse_list_merge(value: str | None) -> ListMergePolicy:
    if not value:
        return DEFAULT_LIST_MERGE
    try:
        return ListMergePolicy(value.strip().lower())
    except ValueError:
        logger.warning(f"Unknown list merge policy {value!r}, using {DEFAULT_LIST_MERGE.value}")
        return DEFAULT_LIST_MERGE


def _optional_path(value: Any) -> Path | None:
    if not value:
        return None
    return Path(str(value)).expanduser()


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for the sync response file store.

    Configuration can be provided directly, via environment variables or
    via a YAML file.

    Environment Variables:
        SYNC_STORE_APP_GROUP_PATH: Shared container directory (takes precedence)
        SYNC_STORE_CACHE_DIR: Cache directory (default: $XDG_CACHE_HOME or ~/.cache)
        SYNC_STORE_LIST_MERGE: "append" (default) or "replace"

    YAML:

    ```yaml
    sync_store:
      app_group_path: /srv/shared/app-group
      cache_dir: ~/.cache/my-client
      list_merge: append
    ```

    Attributes:
        app_group_path: Container shared between applications, used when set
        cache_dir: General cache directory used otherwise
        list_merge: How event lists are combined when merging responses
    """

    app_group_path: Path | None = None
    cache_dir: Path | None = None
    list_merge: ListMergePolicy = DEFAULT_LIST_MERGE

    def cache_root(self) -> Path:
        """Directory under which per-user cache folders are created."""
        if self.app_group_path is not None:
            return Path(self.app_group_path)
        if self.cache_dir is not None:
            return Path(self.cache_dir)
        return default_cache_dir()

    def response_path(self, user_id: str) -> Path:
        """Path of the cached sync response for a user."""
        return self.cache_root() / FOLDER_NAME / user_id / FILE_NAME

    @classmethod
    def from_environment(cls) -> StoreConfig:
        """Create configuration from environment variables."""
        return cls(
            app_group_path=_optional_path(os.environ.get("SYNC_STORE_APP_GROUP_PATH")),
            cache_dir=_optional_path(os.environ.get("SYNC_STORE_CACHE_DIR")),
            list_merge=_parse_list_merge(os.environ.get("SYNC_STORE_LIST_MERGE")),
        )

    @classmethod
    def from_yaml(cls, config_path: Path) -> StoreConfig:
        """Create configuration from the ``sync_store`` section of a YAML file.

        A missing or unreadable file yields the default configuration.
        """
        section = _load_yaml(Path(config_path)).get("sync_store") or {}
        if not isinstance(section, dict):
            logger.warning(f"Ignoring malformed sync_store section in {config_path}")
            section = {}
        list_merge = section.get("list_merge")
        return cls(
            app_group_path=_optional_path(section.get("app_group_path")),
            cache_dir=_optional_path(section.get("cache_dir")),
            list_merge=_parse_list_merge(str(list_merge) if list_merge else None),
        )


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning {} when absent or invalid."""
    if not path.exists():
        return {}

    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Cannot read config {path}: {e}")
        return {}
    return content if isinstance(content, dict) else {}
