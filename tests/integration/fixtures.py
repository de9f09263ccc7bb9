"""Mock responses for DigitalOcean API integration tests."""

from __future__ import annotations

API = "https://api.digitalocean.com"
CLUSTERS_URL = f"{API}/v2/kubernetes/clusters"
DROPLETS_URL = f"{API}/v2/droplets"
DATABASES_URL = f"{API}/v2/databases"
VPCS_URL = f"{API}/v2/vpcs"
REGISTRY_URL = f"{API}/v2/registry"

CLUSTER_ID = "bd5f5959-5e1e-4205-a714-a914373942af"
DROPLET_ID = 3164444
DATABASE_ID = "9cc10173-e9ea-4176-9dbc-a4cee4c4ff30"


def cluster(state: str, *, cluster_id: str = CLUSTER_ID, name: str = "prod-cluster-01") -> dict:
    return {
        "id": cluster_id,
        "name": name,
        "region": "nyc1",
        "version": "1.29.1-do.0",
        "vpc_uuid": "c33931f2-a26a-4e61-b85c-4e95a2ec431b",
        "status": {"state": state, "message": "Provisioning" if state == "provisioning" else ""},
        "tags": ["k8s", f"k8s:{cluster_id}"],
        "node_pools": [{"name": "pool-1", "size": "s-1vcpu-2gb", "count": 3}],
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:05:00Z",
    }


def droplet(status: str, *, public_ip: str | None = None, droplet_id: int = DROPLET_ID, name: str = "web-01") -> dict:
    v4 = [{"ip_address": "10.128.192.124", "netmask": "255.255.0.0", "gateway": "nil", "type": "private"}]
    if public_ip:
        v4.append({"ip_address": public_ip, "netmask": "255.255.240.0", "gateway": "104.131.176.1", "type": "public"})
    return {
        "id": droplet_id,
        "name": name,
        "memory": 1024,
        "vcpus": 1,
        "disk": 25,
        "locked": False,
        "status": status,
        "size_slug": "s-1vcpu-1gb",
        "region": {"name": "New York 3", "slug": "nyc3", "available": True},
        "networks": {"v4": v4, "v6": []},
        "tags": ["web"],
        "vpc_uuid": "760e09ef-dc84-11e8-981e-3cfdfeaae000",
        "created_at": "2024-01-01T00:00:00Z",
    }


def database(status: str, *, database_id: str = DATABASE_ID, name: str = "backend") -> dict:
    return {
        "id": database_id,
        "name": name,
        "engine": "pg",
        "version": "16",
        "num_nodes": 1,
        "size": "db-s-1vcpu-1gb",
        "region": "nyc3",
        "status": status,
        "tags": None,
        "created_at": "2024-01-01T00:00:00Z",
    }


def page(key: str, items: list, *, next_url: str | None = None) -> dict:
    links: dict = {}
    if next_url:
        links = {"pages": {"next": next_url, "last": next_url}}
    return {key: items, "links": links, "meta": {"total": len(items)}}


VPCS_RESPONSE = page(
    "vpcs",
    [
        {
            "id": "5a4981aa-9653-4bd1-bef5-d6bff52042e4",
            "name": "default-nyc1",
            "region": "nyc1",
            "ip_range": "10.116.0.0/20",
            "default": True,
        },
        {
            "id": "e0fe0f4d-596a-465e-a902-571ce57b79fa",
            "name": "staging-nyc3",
            "region": "nyc3",
            "ip_range": "10.10.10.0/24",
            "default": False,
        },
        {
            "id": "0d3176ad-41e0-462c-8a3c-9a2e6e2d1f7a",
            "name": "default-nyc3",
            "region": "nyc3",
            "ip_range": "10.108.0.0/20",
            "default": True,
        },
    ],
)

REPOSITORIES_RESPONSE = page(
    "repositories",
    [
        {"registry_name": "example", "name": "api", "tag_count": 2, "manifest_count": 3},
        {"registry_name": "example", "name": "worker", "tag_count": 1, "manifest_count": 1},
    ],
)

MANIFESTS_RESPONSE = page(
    "manifests",
    [
        {
            "digest": "sha256:cb8a924afdf0229ef7515d9e5b3024e23b3eb03ddbba287f4a19c6ac90b8d221",
            "registry_name": "example",
            "repository": "api",
            "tags": ["latest"],
            "compressed_size_bytes": 2803255,
            "updated_at": "2024-01-01T00:00:00Z",
        },
        {
            "digest": "sha256:9f4e0b2a7b1a0ce4e1a6b0e8d4c3b2a1f0e9d8c7b6a5f4e3d2c1b0a9f8e7d6c5",
            "registry_name": "example",
            "repository": "api",
            "tags": None,
            "compressed_size_bytes": 1024,
        },
    ],
)

RATE_LIMIT_HEADERS = {
    "ratelimit-limit": "5000",
    "ratelimit-remaining": "0",
    "ratelimit-reset": "1444931833",
    "retry-after": "4",
}
