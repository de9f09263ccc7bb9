"""Synchronous client for the DigitalOcean REST API."""

from __future__ import annotations

__all__ = [
    "ClientSettings",
    "ConfigManager",
    "ConflictedWith",
    "Created",
    "DigitalOceanClient",
    "DigitalOceanClientFactory",
    "DigitalOceanCredentials",
    "DigitalOceanError",
]

from .clients.http_client import DigitalOceanClient
from .config import ClientSettings, ConfigManager, DigitalOceanCredentials
from .exceptions import DigitalOceanError
from .factory import DigitalOceanClientFactory
from .models import ConflictedWith, Created
