"""Daily scan quota gate."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from calorie_scanner.config import normalize_email
from calorie_scanner.domain.errors import QuotaExceeded
from calorie_scanner.domain.models import Identity, QuotaStatus
from calorie_scanner.services.timezones import local_day_start, resolve_timezone

DAILY_SCAN_LIMIT = 3

logger = logging.getLogger(__name__)


class ScanCounter(Protocol):
    """Read access to stored scans for quota counting."""

    def count_scans_since(self, user_id: str, since: datetime) -> int:
        """Return how many scans the user created at or after `since`."""


@dataclass
class QuotaService:
    """Decide whether a user may run another scan today.

    The count and the later write are not atomic: two concurrent requests at
    the boundary can both pass and leave the user one scan over the limit.
    """

    counter: ScanCounter
    admin_email: str | None = None
    limit: int = DAILY_SCAN_LIMIT

    def is_admin(self, identity: Identity) -> bool:
        """Return True when the identity matches the configured admin email."""
        admin = normalize_email(self.admin_email)
        return admin is not None and normalize_email(identity.email) == admin

    def check(
        self, identity: Identity, timezone_name: str, now: datetime | None = None
    ) -> QuotaStatus:
        """Return the remaining scans for today in the caller's timezone."""
        if self.is_admin(identity):
            return QuotaStatus(remaining=self.limit, is_admin=True, allowed=True)
        window_start = local_day_start(resolve_timezone(timezone_name), now)
        used = self.counter.count_scans_since(identity.id, window_start)
        return QuotaStatus(
            remaining=max(0, self.limit - used),
            is_admin=False,
            allowed=used < self.limit,
            used=used,
        )

    def enforce(
        self, identity: Identity, timezone_name: str, now: datetime | None = None
    ) -> QuotaStatus:
        """Raise QuotaExceeded when the user has no scans left today."""
        status = self.check(identity, timezone_name, now)
        if not status.allowed:
            logger.info(
                "Daily scan limit reached",
                extra={"user_id": identity.id, "used": status.used},
            )
            raise QuotaExceeded(self.limit)
        return status
