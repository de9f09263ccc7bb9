"""
Idempotent resource creation on top of name-conflict detection.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from digitalocean_client.exceptions import NameConflictError, PendingDeletionError
from digitalocean_client.models import ConflictedWith, Created, CreateResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_or_get_existing(
    create: Callable[[], T],
    find_existing: Callable[[], T | None],
    *,
    description: str,
) -> CreateResult[T]:
    """
    Create a resource, or return the one that already holds its name.

    Args:
        create: issues the create request; raises NameConflictError if the name is taken
        find_existing: looks up the resource that holds the name
        description: a human readable description of the resource, used in error messages

    Returns:
        Created with the new resource, or ConflictedWith with the existing one

    Raises:
        PendingDeletionError: if the name is taken but no resource holding it can be found
    """

    try:
        return Created(create())
    except NameConflictError as exc:
        existing = find_existing()
        if existing is None:
            raise PendingDeletionError(
                f"{description} already exists but could not be retrieved. "
                "It may be pending deletion, which can take up to 15 minutes.",
                status=exc.status,
                error_id=exc.error_id,
            ) from exc
        logger.debug("%s already exists", description)
        return ConflictedWith(existing)
