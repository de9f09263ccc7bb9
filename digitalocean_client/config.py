"""
Configuration management utilities for digitalocean_client.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping, Sequence

from dotenv import dotenv_values

from digitalocean_client.exceptions import ConfigurationError

# Checked in order; the first non-empty value wins.
TOKEN_ENV_VARS = ("DIGITALOCEAN_TOKEN", "DIGITALOCEAN_ACCESS_TOKEN")

DEFAULT_BASE_URL = "https://api.digitalocean.com"
METADATA_BASE_URL = "http://169.254.169.254"


@dataclass(slots=True)
class DigitalOceanCredentials:
    """Credential container holding a personal access token."""

    token: str | None = None

    def is_empty(self) -> bool:
        return self.token is None or not self.token.strip()

    def merge(self, other: "DigitalOceanCredentials") -> "DigitalOceanCredentials":
        """Merge credential sets, preferring non-null values from ``other``."""

        return DigitalOceanCredentials(token=other.token or self.token)

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in asdict(self).items()
            if isinstance(value, str) and value
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, str | None]) -> "DigitalOceanCredentials":
        token = data.get("token")
        return cls(token=token.strip() if isinstance(token, str) else None)


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Transport settings shared by every request issued through a client."""

    base_url: str = DEFAULT_BASE_URL
    metadata_url: str = METADATA_BASE_URL
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    # The metadata service either answers quickly or is absent (outside a droplet).
    metadata_timeout: float = 1.0
    pool_connections: int = 10
    pool_maxsize: int = 10
    per_page: int = 200

    def __post_init__(self) -> None:
        for name in ("connect_timeout", "read_timeout", "metadata_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive.")
        if not 1 <= self.per_page <= 200:
            raise ConfigurationError("per_page must be between 1 and 200.")
        if self.pool_connections < 1 or self.pool_maxsize < 1:
            raise ConfigurationError("Connection pool sizes must be positive.")

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "ClientSettings":
        """Build settings from ``DIGITALOCEAN_*`` environment variables, falling back to defaults."""

        source = os.environ if env is None else env
        defaults = cls()
        try:
            return cls(
                base_url=source.get("DIGITALOCEAN_API_URL", defaults.base_url).rstrip("/"),
                metadata_url=source.get("DIGITALOCEAN_METADATA_URL", defaults.metadata_url).rstrip("/"),
                connect_timeout=float(
                    source.get("DIGITALOCEAN_CONNECT_TIMEOUT", defaults.connect_timeout)
                ),
                read_timeout=float(source.get("DIGITALOCEAN_READ_TIMEOUT", defaults.read_timeout)),
                metadata_timeout=float(
                    source.get("DIGITALOCEAN_METADATA_TIMEOUT", defaults.metadata_timeout)
                ),
                pool_connections=int(
                    source.get("DIGITALOCEAN_POOL_CONNECTIONS", defaults.pool_connections)
                ),
                pool_maxsize=int(source.get("DIGITALOCEAN_POOL_MAXSIZE", defaults.pool_maxsize)),
                per_page=int(source.get("DIGITALOCEAN_PER_PAGE", defaults.per_page)),
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid client setting: {exc}") from exc


class ConfigManager:
    """Loads and persists credentials from environment variables, a .env file or disk."""

    def __init__(
        self,
        credential_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
        dotenv_path: Path | None = None,
    ) -> None:
        self._credential_path = credential_path or Path("credentials/digitalocean.json")
        self._env = os.environ if env is None else env
        self._dotenv_path = dotenv_path or Path(".env")

    def load_credentials(
        self,
        priority: Sequence[str] = ("env", "dotenv", "file"),
    ) -> DigitalOceanCredentials:
        """
        Load credentials according to the requested priority order.

        Raises:
            ConfigurationError: when no credentials are available.
        """

        for source in priority:
            if source == "env":
                credentials = self._load_from_mapping(self._env)
            elif source == "dotenv":
                credentials = self._load_from_dotenv()
            elif source == "file":
                credentials = self._load_from_file()
            else:
                raise ValueError(f"Unknown credential source '{source}'.")

            if credentials and not credentials.is_empty():
                return credentials

        raise ConfigurationError("DigitalOcean credentials are not configured.")

    def load_settings(self) -> ClientSettings:
        return ClientSettings.from_env(self._env)

    def save_credentials(self, credentials: DigitalOceanCredentials) -> None:
        """Persist credentials to disk, merging with existing values."""

        existing = self._load_from_file()
        merged = existing.merge(credentials) if existing else credentials

        self._credential_path.parent.mkdir(parents=True, exist_ok=True)
        with self._credential_path.open("w", encoding="utf-8") as fp:
            json.dump(merged.to_dict(), fp, indent=2, sort_keys=True)

        # Owner read/write only
        os.chmod(self._credential_path, 0o600)

    @staticmethod
    def _load_from_mapping(values: Mapping[str, str | None]) -> DigitalOceanCredentials | None:
        for name in TOKEN_ENV_VARS:
            token = values.get(name)
            if token and token.strip():
                return DigitalOceanCredentials(token=token.strip())
        return None

    def _load_from_dotenv(self) -> DigitalOceanCredentials | None:
        if not self._dotenv_path.exists():
            return None
        return self._load_from_mapping(dotenv_values(self._dotenv_path))

    def _load_from_file(self) -> DigitalOceanCredentials | None:
        if not self._credential_path.exists():
            return None

        with self._credential_path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)

        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Credential file {self._credential_path} did not contain a mapping."
            )

        credentials = DigitalOceanCredentials.from_mapping(data)
        return credentials if not credentials.is_empty() else None
