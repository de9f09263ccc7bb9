"""
Factory for creating DigitalOcean client instances with proper initialization.
"""

from __future__ import annotations

import logging

from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.config import ClientSettings, ConfigManager, DigitalOceanCredentials
from digitalocean_client.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class DigitalOceanClientFactory:
    """Factory for creating properly initialized DigitalOcean API clients."""

    @staticmethod
    def create_from_config(
        config_manager: ConfigManager,
        *,
        settings: ClientSettings | None = None,
    ) -> DigitalOceanClient:
        """
        Create a DigitalOceanClient from configured credentials and settings.

        Args:
            config_manager: ConfigManager used to locate the access token
            settings: transport settings; loaded from the environment when omitted

        Returns:
            A client that the caller must close

        Raises:
            ConfigurationError: If credentials are missing or settings are invalid
        """
        credentials = config_manager.load_credentials()
        return DigitalOceanClientFactory.create_from_credentials(
            credentials,
            settings=settings or config_manager.load_settings(),
        )

    @staticmethod
    def create_from_credentials(
        credentials: DigitalOceanCredentials,
        *,
        settings: ClientSettings | None = None,
    ) -> DigitalOceanClient:
        """
        Create a DigitalOceanClient directly from credentials.

        Raises:
            ConfigurationError: If the access token is missing
        """
        if credentials.is_empty():
            raise ConfigurationError("An access token is required")

        resolved = settings or ClientSettings()
        logger.debug("Creating DigitalOcean client for %s", resolved.base_url)
        return DigitalOceanClient(credentials.token.strip(), settings=resolved)
