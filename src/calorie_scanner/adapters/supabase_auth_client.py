"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from calorie_scanner.domain.models import Identity
from calorie_scanner.services.auth import IdentityVerifier

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityVerifier(IdentityVerifier):
    """Verify access tokens issued by Supabase Auth."""

    client: Client

    def verify(self, token: str) -> Identity | None:
        """Return the identity for a valid access token."""
        try:
            response = self.client.auth.get_user(token)
        except AuthError:
            logger.info("Rejected invalid access token")
            return None
        if response is None or response.user is None:
            return None
        user = response.user
        return Identity(id=str(user.id), email=user.email)
