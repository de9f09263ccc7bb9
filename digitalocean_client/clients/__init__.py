"""HTTP client and response classification for the DigitalOcean REST API."""

from __future__ import annotations

__all__ = [
    "DigitalOceanClient",
    "expect",
    "raise_for_response",
]

from .classifier import expect, raise_for_response
from .http_client import DigitalOceanClient
