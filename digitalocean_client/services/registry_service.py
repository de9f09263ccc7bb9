"""
Container registry workflows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote

from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.models import Manifest, Repository

# https://docs.digitalocean.com/reference/api/digitalocean/#tag/Container-Registry
REGISTRY_PATH = "v2/registry"


@dataclass(slots=True)
class RegistryService:
    """Lists repositories and manifests, and deletes manifests."""

    client: DigitalOceanClient

    def get_repositories(
        self,
        registry: str,
        predicate: Callable[[Repository], bool] | None = None,
    ) -> list[Repository]:
        return self.client.get_elements(
            self._registry_url(registry, "repositoriesV2"),
            "repositories",
            Repository.from_api,
            predicate,
        )

    def find_repository(self, registry: str, predicate: Callable[[Repository], bool]) -> Repository | None:
        return self.client.get_element(
            self._registry_url(registry, "repositoriesV2"),
            "repositories",
            Repository.from_api,
            predicate,
        )

    def get_manifests(
        self,
        registry: str,
        repository: str,
        predicate: Callable[[Manifest], bool] | None = None,
    ) -> list[Manifest]:
        return self.client.get_elements(
            self._registry_url(registry, f"repositories/{quote(repository, safe='')}/digests"),
            "manifests",
            Manifest.from_api,
            predicate,
        )

    def delete_manifest(self, registry: str, repository: str, digest: str) -> None:
        """
        Delete a manifest. A manifest that no longer exists counts as deleted.

        Raises:
            ResourceBusyError: if garbage collection is running
            PreconditionFailedError: if another manifest references this one
        """

        url = self._registry_url(registry, f"repositories/{quote(repository, safe='')}/digests/{digest}")
        self.client.destroy_resource(url, resource=f"Manifest: {repository}@{digest}")

    def _registry_url(self, registry: str, path: str) -> str:
        return self.client.url(f"{REGISTRY_PATH}/{registry}/{path}")
