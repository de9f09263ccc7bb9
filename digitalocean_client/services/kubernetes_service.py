"""
Kubernetes cluster workflows built on top of the HTTP client.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from digitalocean_client.clients.classifier import expect, raise_for_response
from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.models import CreateResult, KubernetesCluster, KubernetesState
from digitalocean_client.services.creation import create_or_get_existing
from digitalocean_client.services.polling import PollTarget, StatePoller

# https://docs.digitalocean.com/reference/api/digitalocean/#tag/Kubernetes
CLUSTERS_PATH = "v2/kubernetes/clusters"


def node_pool(
    name: str,
    size: str,
    count: int,
    *,
    tags: Iterable[str] | None = None,
    min_nodes: int | None = None,
    max_nodes: int | None = None,
) -> dict[str, Any]:
    """Build the request body of a node pool. Autoscaling is enabled when both bounds are set."""

    if count < 1:
        raise ValueError(f"count must be positive: {count}")
    pool: dict[str, Any] = {"name": name, "size": size, "count": count}
    if tags:
        pool["tags"] = list(tags)
    if min_nodes is not None and max_nodes is not None:
        if not min_nodes <= count <= max_nodes:
            raise ValueError(f"count ({count}) must be between min_nodes ({min_nodes}) and max_nodes ({max_nodes})")
        pool["auto_scale"] = True
        pool["min_nodes"] = min_nodes
        pool["max_nodes"] = max_nodes
    return pool


@dataclass(slots=True)
class KubernetesService:
    """Create, look up, wait on and destroy Kubernetes clusters."""

    client: DigitalOceanClient
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def create_cluster(
        self,
        name: str,
        region: str,
        version: str,
        node_pools: Iterable[Mapping[str, Any]],
        *,
        vpc_uuid: str | None = None,
        tags: Iterable[str] | None = None,
        auto_upgrade: bool = False,
        surge_upgrade: bool = False,
        ha: bool = False,
    ) -> CreateResult[KubernetesCluster]:
        """
        Create a cluster, or return the existing cluster with the same name.

        Raises:
            PendingDeletionError: if a cluster with the same name is being deleted
            UnsupportedCombinationError: if the server rejects the combination of parameters
        """

        pools = [dict(pool) for pool in node_pools]
        if not pools:
            raise ValueError("At least one node pool is required.")

        payload: dict[str, Any] = {
            "name": name,
            "region": region,
            "version": version,
            "node_pools": pools,
        }
        if vpc_uuid:
            payload["vpc_uuid"] = vpc_uuid
        if tags:
            payload["tags"] = list(tags)
        if auto_upgrade:
            payload["auto_upgrade"] = True
        if surge_upgrade:
            payload["surge_upgrade"] = True
        if ha:
            payload["ha"] = True

        def create() -> KubernetesCluster:
            request = self.client.create_request(self.client.url(CLUSTERS_PATH), payload, method="POST")
            body = expect(self.client.send(request), 201)
            return KubernetesCluster.from_api(body["kubernetes_cluster"])

        return create_or_get_existing(
            create,
            lambda: self.find_cluster(lambda cluster: cluster.name == name),
            description=f"Kubernetes cluster {name!r}",
        )

    def get_cluster(self, cluster_id: str) -> KubernetesCluster:
        return self.client.get_resource(
            self._cluster_url(cluster_id),
            lambda body: KubernetesCluster.from_api(body["kubernetes_cluster"]),
            resource=f"Kubernetes cluster: {cluster_id}",
        )

    def get_clusters(
        self, predicate: Callable[[KubernetesCluster], bool] | None = None
    ) -> list[KubernetesCluster]:
        return self.client.get_elements(
            self.client.url(CLUSTERS_PATH),
            "kubernetes_clusters",
            KubernetesCluster.from_api,
            predicate,
        )

    def find_cluster(self, predicate: Callable[[KubernetesCluster], bool]) -> KubernetesCluster | None:
        return self.client.get_element(
            self.client.url(CLUSTERS_PATH),
            "kubernetes_clusters",
            KubernetesCluster.from_api,
            predicate,
        )

    def wait_for(
        self,
        cluster: KubernetesCluster,
        state: KubernetesState,
        timeout: float,
    ) -> KubernetesCluster | None:
        """Block until ``cluster`` reaches ``state``. Returns None once a deleted cluster disappears."""

        poller: StatePoller[KubernetesCluster] = StatePoller(
            fetch=lambda: self.get_cluster(cluster.id),
            state_of=lambda current: current.state,
            sleep=self.sleep,
            clock=self.clock,
        )
        return poller.wait_for(PollTarget(state, cluster.id, cluster.name), timeout)

    def destroy_cluster(self, cluster_id: str) -> None:
        self.client.destroy_resource(self._cluster_url(cluster_id), resource=f"Kubernetes cluster: {cluster_id}")

    def destroy_cluster_recursively(self, cluster_id: str) -> None:
        """Destroy the cluster together with its load balancers, volumes and volume snapshots."""

        url = self._cluster_url(cluster_id) + "/destroy_with_associated_resources/dangerous"
        self.client.destroy_resource(url, resource=f"Kubernetes cluster: {cluster_id}")

    def wait_for_destroy(self, cluster: KubernetesCluster, timeout: float) -> None:
        self.wait_for(cluster, KubernetesState.DELETED, timeout)

    def get_kubeconfig(self, cluster_id: str, expiry: float | None = None) -> str:
        """
        Download the kubeconfig file of a cluster.

        Args:
            cluster_id: the cluster
            expiry: the lifetime of the embedded token in seconds, or None for the server default
        """

        params = {"expiry_seconds": int(expiry)} if expiry is not None else None
        request = self.client.create_request(self._cluster_url(cluster_id) + "/kubeconfig", params=params)
        response = self.client.send(request)
        if response.status_code != 200:
            raise_for_response(response, resource=f"Kubernetes cluster: {cluster_id}")
        return response.text

    def _cluster_url(self, cluster_id: str) -> str:
        return self.client.url(f"{CLUSTERS_PATH}/{cluster_id}")
