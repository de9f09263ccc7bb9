"""
VPC lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.models import Vpc

# https://docs.digitalocean.com/reference/api/digitalocean/#tag/VPCs
VPCS_PATH = "v2/vpcs"


@dataclass(slots=True)
class NetworkService:
    client: DigitalOceanClient

    def get_vpcs(self, predicate: Callable[[Vpc], bool] | None = None) -> list[Vpc]:
        return self.client.get_elements(self.client.url(VPCS_PATH), "vpcs", Vpc.from_api, predicate)

    def find_vpc(self, predicate: Callable[[Vpc], bool]) -> Vpc | None:
        return self.client.get_element(self.client.url(VPCS_PATH), "vpcs", Vpc.from_api, predicate)

    def get_vpc(self, vpc_id: str) -> Vpc:
        return self.client.get_resource(
            self.client.url(f"{VPCS_PATH}/{vpc_id}"),
            lambda body: Vpc.from_api(body["vpc"]),
            resource=f"VPC: {vpc_id}",
        )

    def get_default_vpc(self, region: str) -> Vpc | None:
        """Return the default VPC of a region, or None if the region has none yet."""

        return self.find_vpc(lambda vpc: vpc.default and vpc.region == region)
