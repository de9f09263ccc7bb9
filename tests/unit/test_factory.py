"""
Unit tests for DigitalOceanClientFactory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.config import ClientSettings, ConfigManager, DigitalOceanCredentials
from digitalocean_client.exceptions import ConfigurationError
from digitalocean_client.factory import DigitalOceanClientFactory


def test_create_from_credentials_builds_client() -> None:
    settings = ClientSettings(base_url="http://localhost:9000")

    client = DigitalOceanClientFactory.create_from_credentials(
        DigitalOceanCredentials(token="dop_v1_test"), settings=settings
    )

    try:
        assert isinstance(client, DigitalOceanClient)
        assert client.settings is settings
        assert client.url("v2/droplets") == "http://localhost:9000/v2/droplets"
    finally:
        client.close()


def test_create_from_credentials_requires_token() -> None:
    with pytest.raises(ConfigurationError, match="access token"):
        DigitalOceanClientFactory.create_from_credentials(DigitalOceanCredentials(token="  "))


def test_create_from_config_loads_settings_from_environment(tmp_path: Path) -> None:
    manager = ConfigManager(
        credential_path=tmp_path / "missing.json",
        env={"DIGITALOCEAN_TOKEN": "dop_v1_env", "DIGITALOCEAN_PER_PAGE": "25"},
        dotenv_path=tmp_path / ".env",
    )

    with DigitalOceanClientFactory.create_from_config(manager) as client:
        assert client.settings.per_page == 25


def test_create_from_config_propagates_missing_credentials(tmp_path: Path) -> None:
    manager = ConfigManager(credential_path=tmp_path / "missing.json", env={}, dotenv_path=tmp_path / ".env")

    with pytest.raises(ConfigurationError):
        DigitalOceanClientFactory.create_from_config(manager)
