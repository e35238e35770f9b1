"""Scan history persistence and retrieval."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol
from uuid import UUID

from calorie_scanner.domain.errors import ScanNotFound
from calorie_scanner.domain.scans import ScanRecord, ScanResult
from calorie_scanner.services.prompting import sanitize_context

logger = logging.getLogger(__name__)


class HistoryPeriod(str, Enum):
    """Rolling windows offered by the history filter."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    def start(self, now: datetime) -> datetime:
        """Return the earliest timestamp included in the window."""
        days = {"day": 1, "week": 7, "month": 30, "year": 365}[self.value]
        return now - timedelta(days=days)


class ScanRepository(Protocol):
    """Persistence interface for scan records."""

    def create_scan(
        self, user_id: str, result: ScanResult, context: str
    ) -> ScanRecord:
        """Insert a scan; the store assigns id and creation time."""

    def count_scans_since(self, user_id: str, since: datetime) -> int:
        """Return how many scans the user created at or after `since`."""

    def list_scans(self, user_id: str, since: datetime | None) -> list[ScanRecord]:
        """Return the user's scans, optionally from `since` onwards."""

    def get_scan(self, scan_id: UUID) -> ScanRecord | None:
        """Return a scan by id."""

    def delete_scan(self, scan_id: UUID) -> None:
        """Delete a scan by id."""

    def delete_user_scans(self, user_id: str) -> int:
        """Delete every scan owned by the user and return how many were removed."""


@dataclass
class ScanService:
    """Service for saving and browsing a user's scans."""

    repository: ScanRepository

    def save(
        self, user_id: str, result: ScanResult, context: str | None
    ) -> ScanRecord:
        """Persist a confirmed scan result."""
        record = self.repository.create_scan(
            user_id=user_id, result=result, context=sanitize_context(context)
        )
        logger.info("Scan saved", extra={"user_id": user_id, "scan_id": record.id})
        return record

    def history(
        self,
        user_id: str,
        period: HistoryPeriod | None = None,
        now: datetime | None = None,
    ) -> list[ScanRecord]:
        """Return the user's scans newest first."""
        since = period.start(now or datetime.now(tz=UTC)) if period else None
        scans = self.repository.list_scans(user_id, since)
        return sorted(scans, key=lambda scan: scan.created_at, reverse=True)

    def delete(self, user_id: str, scan_id: UUID) -> None:
        """Delete one scan owned by the user."""
        scan = self.repository.get_scan(scan_id)
        if scan is None or scan.user_id != user_id:
            raise ScanNotFound()
        self.repository.delete_scan(scan_id)

    def clear_history(self, user_id: str) -> int:
        """Delete all of the user's scans."""
        deleted = self.repository.delete_user_scans(user_id)
        logger.info("Scan history cleared", extra={"user_id": user_id})
        return deleted
