from __future__ import annotations

import pytest
from pydantic import ValidationError

from digitalocean_client.models import (
    Database,
    DatabaseState,
    Droplet,
    DropletState,
    ErrorBody,
    KubernetesCluster,
    KubernetesState,
    Manifest,
)


def test_droplet_from_api_normalizes_id_and_region() -> None:
    droplet = Droplet.from_api(
        {
            "id": 3164444,
            "name": "web-01",
            "status": "active",
            "region": {"slug": "nyc3", "name": "New York 3"},
            "networks": {
                "v4": [
                    {"ip_address": "10.128.192.124", "type": "private"},
                    {"ip_address": "104.131.186.241", "type": "public"},
                ]
            },
        }
    )

    assert droplet.id == "3164444"
    assert droplet.region == "nyc3"
    assert droplet.status is DropletState.ACTIVE
    assert droplet.public_ipv4() == "104.131.186.241"


def test_droplet_without_public_address() -> None:
    droplet = Droplet.from_api({"id": 1, "name": "web-01", "status": "new"})

    assert droplet.public_ipv4() is None


def test_cluster_state_comes_from_status() -> None:
    cluster = KubernetesCluster.from_api(
        {"id": "abc", "name": "prod", "status": {"state": "provisioning"}, "node_pools": []}
    )

    assert cluster.state is KubernetesState.PROVISIONING


def test_unknown_state_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Database.from_api({"id": "abc", "name": "backend", "status": "exploding"})


def test_database_from_api() -> None:
    database = Database.from_api({"id": "abc", "name": "backend", "status": "online", "tags": None})

    assert database.status is DatabaseState.ONLINE
    assert database.tags is None


def test_manifest_tags_default_to_empty() -> None:
    assert Manifest.from_api({"digest": "sha256:abc", "tags": None}).tags == []


def test_error_body_tolerates_non_mapping_payload() -> None:
    assert ErrorBody.from_api(["unexpected"]).message == ""
    assert ErrorBody.from_api({"id": "not_found", "message": "gone"}).id == "not_found"


def test_error_body_null_message_becomes_empty() -> None:
    body = ErrorBody.from_api({"id": "not_found", "message": None})

    assert body.message == ""
    assert body.id == "not_found"
