"""
Droplet workflows, including queries against the droplet metadata service.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, cast

from digitalocean_client.clients.classifier import expect
from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.models import Droplet, DropletState
from digitalocean_client.services.polling import PollTarget, StatePoller

# https://docs.digitalocean.com/reference/api/digitalocean/#tag/Droplets
DROPLETS_PATH = "v2/droplets"

MAX_USER_DATA_LENGTH = 64 * 1024


@dataclass(slots=True)
class DropletService:
    """High level orchestration for droplets."""

    client: DigitalOceanClient
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def create_droplet(
        self,
        name: str,
        size: str,
        image: str,
        *,
        region: str | None = None,
        vpc_uuid: str | None = None,
        ssh_keys: Iterable[str | int] | None = None,
        tags: Iterable[str] | None = None,
        user_data: str | None = None,
        **features: bool,
    ) -> Droplet:
        """
        Create a droplet. Droplet names are not unique, so every call creates a new droplet.

        Args:
            features: optional droplet features such as ``ipv6=True`` or ``monitoring=True``

        Raises:
            UnsupportedCombinationError: if the image does not fit on the requested droplet size
        """

        if user_data is not None and len(user_data) > MAX_USER_DATA_LENGTH:
            raise ValueError(f"user_data may not exceed {MAX_USER_DATA_LENGTH} characters.")

        payload: dict[str, Any] = {"name": name, "size": size, "image": image}
        if region:
            payload["region"] = region
        if vpc_uuid:
            payload["vpc_uuid"] = vpc_uuid
        if ssh_keys:
            payload["ssh_keys"] = list(ssh_keys)
        if tags:
            payload["tags"] = list(tags)
        if user_data:
            payload["user_data"] = user_data
        payload.update({feature: True for feature, enabled in features.items() if enabled})

        request = self.client.create_request(self.client.url(DROPLETS_PATH), payload, method="POST")
        body = expect(self.client.send(request), 202)
        return Droplet.from_api(body["droplet"])

    def get_droplet(self, droplet_id: str) -> Droplet:
        return self.client.get_resource(
            self._droplet_url(droplet_id),
            lambda body: Droplet.from_api(body["droplet"]),
            resource=f"Droplet: {droplet_id}",
        )

    def get_droplets(
        self,
        predicate: Callable[[Droplet], bool] | None = None,
        *,
        tag: str | None = None,
    ) -> list[Droplet]:
        params = {"tag_name": tag} if tag else None
        return self.client.get_elements(
            self.client.url(DROPLETS_PATH), "droplets", Droplet.from_api, predicate, params=params
        )

    def find_droplet(self, predicate: Callable[[Droplet], bool]) -> Droplet | None:
        return self.client.get_element(self.client.url(DROPLETS_PATH), "droplets", Droplet.from_api, predicate)

    def wait_for(self, droplet: Droplet, state: DropletState, timeout: float) -> Droplet | None:
        poller: StatePoller[Droplet] = StatePoller(
            fetch=lambda: self.get_droplet(droplet.id),
            state_of=lambda current: current.status,
            sleep=self.sleep,
            clock=self.clock,
        )
        return poller.wait_for(PollTarget(state, droplet.id, droplet.name), timeout)

    def wait_for_network(self, droplet: Droplet, timeout: float) -> Droplet:
        """
        Block until the droplet has been assigned a public IPv4 address.

        Raises:
            OperationTimeout: if no address was assigned before the timeout occurred
        """

        # The address is not a lifecycle state, so poll on whether it is present.
        poller: StatePoller[Droplet] = StatePoller(
            fetch=lambda: self.get_droplet(droplet.id),
            state_of=lambda current: current.public_ipv4() is not None,
            sleep=self.sleep,
            clock=self.clock,
        )
        return cast(Droplet, poller.wait_for(PollTarget(True, droplet.id, droplet.name), timeout))

    def destroy_droplet(self, droplet_id: str) -> None:
        self.client.destroy_resource(self._droplet_url(droplet_id), resource=f"Droplet: {droplet_id}")

    def wait_for_destroy(self, droplet: Droplet, timeout: float) -> None:
        self.wait_for(droplet, DropletState.DELETED, timeout)

    # ------------------------------------------------------------------
    # Metadata service (only reachable from within a droplet)
    # ------------------------------------------------------------------

    def get_current_droplet_id(self) -> str | None:
        return self.client.get_metadata_value("id")

    def get_current_droplet_hostname(self) -> str | None:
        return self.client.get_metadata_value("hostname")

    def get_current_droplet_region(self) -> str | None:
        return self.client.get_metadata_value("region")

    def _droplet_url(self, droplet_id: str) -> str:
        return self.client.url(f"{DROPLETS_PATH}/{droplet_id}")
