"""Utility helpers for the digitalocean_client package."""

from __future__ import annotations

__all__ = [
    "TimeLimit",
]

from .time_limit import TimeLimit
