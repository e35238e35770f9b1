"""Bearer authentication dependency."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from calorie_scanner.domain.errors import Unauthenticated
from calorie_scanner.domain.models import Identity
from calorie_scanner.services.auth import extract_bearer_token

if TYPE_CHECKING:
    from calorie_scanner.containers import AppContainer


async def require_identity(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Identity:
    """Resolve the caller from the Authorization header."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated()
    container: AppContainer = request.app.state.container
    identity = container.identity_verifier.verify(token)
    if identity is None:
        raise Unauthenticated()
    return identity
