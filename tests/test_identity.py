"""Tests for identity module."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from sync_response_store.exceptions import IdentityError
from sync_response_store.identity import (
    ConfigFileIdentityProvider,
    Credentials,
    StaticIdentityProvider,
    validate_user_id,
)


class TestCredentials:
    """Tests for Credentials dataclass."""

    def test_minimal(self) -> None:
        credentials = Credentials(user_id="@alice:example.org")
        assert credentials.device_id is None
        assert credentials.homeserver is None

    def test_roundtrip(self) -> None:
        """Test serialization roundtrip."""
        original = Credentials(
            user_id="@alice:example.org",
            device_id="DEVICE1",
            homeserver="https://matrix.example.org",
        )
        assert Credentials.from_dict(original.to_dict()) == original


class TestValidateUserId:
    """Tests for validate_user_id."""

    def test_valid(self) -> None:
        assert validate_user_id("@alice:example.org") == "@alice:example.org"

    @pytest.mark.parametrize("user_id", [None, "", "   "])
    def test_missing(self, user_id: str | None) -> None:
        """Missing or blank IDs are rejected."""
        with pytest.raises(IdentityError):
            validate_user_id(user_id)

    @pytest.mark.parametrize("user_id", [".", "..", "@a/b:x", "@a\\b:x", "@a\x00:x"])
    def test_not_a_path_component(self, user_id: str) -> None:
        """IDs that would escape or split the cache folder are rejected."""
        with pytest.raises(IdentityError) as exc_info:
            validate_user_id(user_id)
        assert exc_info.value.user_id == user_id


class TestStaticIdentityProvider:
    """Tests for StaticIdentityProvider."""

    async def test_returns_credentials(self) -> None:
        credentials = Credentials(user_id="@alice:example.org")
        assert await StaticIdentityProvider(credentials).get_credentials() is credentials


class TestConfigFileIdentityProvider:
    """Tests for ConfigFileIdentityProvider."""

    async def test_reads_identity(self, temp_dir: Path) -> None:
        """Credentials are read from the identity section."""
        config_path = temp_dir / "settings.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "identity": {
                        "user_id": "@alice:example.org",
                        "device_id": "DEVICE1",
                    }
                }
            )
        )
        provider = ConfigFileIdentityProvider(config_path)

        credentials = await provider.get_credentials()

        assert credentials.user_id == "@alice:example.org"
        assert credentials.device_id == "DEVICE1"

    async def test_caches_credentials(self, temp_dir: Path) -> None:
        """The file is only read until credentials are found."""
        config_path = temp_dir / "settings.yaml"
        config_path.write_text(yaml.safe_dump({"identity": {"user_id": "@alice:example.org"}}))
        provider = ConfigFileIdentityProvider(config_path)

        first = await provider.get_credentials()
        config_path.unlink()

        assert await provider.get_credentials() is first

    async def test_missing_file(self, temp_dir: Path) -> None:
        """No configuration means no identity."""
        provider = ConfigFileIdentityProvider(temp_dir / "missing.yaml")
        with pytest.raises(IdentityError):
            await provider.get_credentials()

    async def test_missing_user_id(self, temp_dir: Path) -> None:
        config_path = temp_dir / "settings.yaml"
        config_path.write_text(yaml.safe_dump({"identity": {"device_id": "DEVICE1"}}))
        with pytest.raises(IdentityError):
            await ConfigFileIdentityProvider(config_path).get_credentials()
