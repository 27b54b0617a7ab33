"""Caller identity for API requests.

Authentication happens in front of this service. The fronting layer forwards
the shared API token and the authenticated user's id on every request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Depends, Header, HTTPException, Request, status

from pantry_tracker.config import parse_user_id

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_user(
    x_api_token: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> UUID:
    """Return the calling user's id after checking the API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    user_id = parse_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id
