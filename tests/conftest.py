"""Shared pytest fixtures."""

from __future__ import annotations

from typing import Iterator

import pytest

from digitalocean_client.clients.http_client import DigitalOceanClient

TOKEN = "dop_v1_test_token"


class FakeTime:
    """Clock whose time only advances when the code under test sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def client() -> Iterator[DigitalOceanClient]:
    do_client = DigitalOceanClient(TOKEN)
    yield do_client
    do_client.close()
