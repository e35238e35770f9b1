"""Bearer credential handling."""

from typing import Protocol

from calorie_scanner.domain.models import Identity

_BEARER_PREFIX = "Bearer "


class IdentityVerifier(Protocol):
    """Interface for the external auth provider."""

    def verify(self, token: str) -> Identity | None:
        """Return the identity for a valid token, or None."""


def extract_bearer_token(header: str | None) -> str | None:
    """Return the token from an `Authorization: Bearer <token>` header."""
    if not header or not header.startswith(_BEARER_PREFIX):
        return None
    token = header[len(_BEARER_PREFIX) :].strip()
    return token or None
