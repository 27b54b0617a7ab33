"""Ownership checks for user-scoped resources."""

from collections.abc import Callable
from typing import TypeVar
from uuid import UUID

from pantry_tracker.domain.errors import ForbiddenError, NotFoundError

T = TypeVar("T")


def authorize_resource(
    resource: T | None,
    owner_of: Callable[[T], UUID],
    user_id: UUID,
    resource_name: str,
) -> T:
    """Return the resource if it exists and belongs to the user."""
    if resource is None:
        raise NotFoundError(resource_name)
    if owner_of(resource) != user_id:
        raise ForbiddenError(resource_name)
    return resource
