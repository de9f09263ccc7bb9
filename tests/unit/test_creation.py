from __future__ import annotations

from unittest.mock import Mock

import pytest

from digitalocean_client.exceptions import (
    NameConflictError,
    PendingDeletionError,
    UnsupportedCombinationError,
)
from digitalocean_client.models import ConflictedWith, Created
from digitalocean_client.services.creation import create_or_get_existing


def test_new_resource_is_reported_as_created() -> None:
    find_existing = Mock()

    result = create_or_get_existing(lambda: "cluster-1", find_existing, description="cluster")

    assert result == Created("cluster-1")
    assert result.created and not result.conflicted
    find_existing.assert_not_called()


def test_name_conflict_returns_existing_resource() -> None:
    create = Mock(side_effect=NameConflictError("a cluster with this name already exists", status=422))

    result = create_or_get_existing(create, lambda: "existing-cluster", description="cluster")

    assert isinstance(result, ConflictedWith)
    assert result.resource == "existing-cluster"
    assert result.conflicted and not result.created


def test_conflict_without_visible_resource_is_pending_deletion() -> None:
    create = Mock(side_effect=NameConflictError("cluster name is not available", status=422))

    with pytest.raises(PendingDeletionError) as exc_info:
        create_or_get_existing(create, lambda: None, description="Database cluster 'backend'")

    assert "Database cluster 'backend'" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, NameConflictError)


def test_other_errors_propagate_without_lookup() -> None:
    create = Mock(side_effect=UnsupportedCombinationError("invalid size", status=422))
    find_existing = Mock()

    with pytest.raises(UnsupportedCombinationError):
        create_or_get_existing(create, find_existing, description="cluster")

    find_existing.assert_not_called()
