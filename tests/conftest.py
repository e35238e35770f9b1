"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from calorie_scanner.config import Settings
from calorie_scanner.containers import AppContainer
from calorie_scanner.domain.models import Identity
from calorie_scanner.domain.scans import ScanRecord, ScanResult
from calorie_scanner.services.auth import IdentityVerifier
from calorie_scanner.services.quota import QuotaService
from calorie_scanner.services.rate_limit import InMemoryRateLimiter
from calorie_scanner.services.scans import ScanRepository, ScanService
from calorie_scanner.services.vision import VisionClient, VisionService

USER = Identity(id="user-1", email="user@example.com")
ADMIN = Identity(id="admin-1", email="Admin@Example.com")

APPLE_PAYLOAD: dict[str, object] = {
    "foodName": "Apple",
    "calories": 95,
    "ingredients": ["apple"],
    "riskLevel": "low",
    "riskReason": "Whole fruit with fiber and no added sugar.",
    "humorComment": "An apple a day keeps the scale at bay.",
    "brandNote": None,
    "burnOff": {
        "treadmill": "14 min",
        "cycling": "10 min (3.5 km)",
        "walking": "20 min (1.7 km)",
        "running": "8 min (1.4 km)",
        "burnComment": "Barely a warm-up.",
    },
}

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAAB"


def apple_result() -> ScanResult:
    return ScanResult.model_validate(APPLE_PAYLOAD)


@dataclass
class InMemoryScanRepository(ScanRepository):
    """In-memory scan repository for tests."""

    scans: dict[UUID, ScanRecord] = field(default_factory=dict)
    fail_reads: bool = False
    count_calls: int = 0

    def add(
        self,
        user_id: str,
        created_at: datetime,
        result: ScanResult | None = None,
        context: str = "",
    ) -> ScanRecord:
        record = ScanRecord(
            id=uuid4(),
            user_id=user_id,
            context=context,
            result=result or apple_result(),
            created_at=created_at,
        )
        self.scans[record.id] = record
        return record

    def create_scan(
        self, user_id: str, result: ScanResult, context: str
    ) -> ScanRecord:
        return self.add(user_id, datetime.now(tz=UTC), result, context)

    def count_scans_since(self, user_id: str, since: datetime) -> int:
        self.count_calls += 1
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        return sum(
            1
            for scan in self.scans.values()
            if scan.user_id == user_id and scan.created_at >= since
        )

    def list_scans(self, user_id: str, since: datetime | None) -> list[ScanRecord]:
        return [
            scan
            for scan in self.scans.values()
            if scan.user_id == user_id and (since is None or scan.created_at >= since)
        ]

    def get_scan(self, scan_id: UUID) -> ScanRecord | None:
        return self.scans.get(scan_id)

    def delete_scan(self, scan_id: UUID) -> None:
        self.scans.pop(scan_id, None)

    def delete_user_scans(self, user_id: str) -> int:
        owned = [key for key, scan in self.scans.items() if scan.user_id == user_id]
        for key in owned:
            del self.scans[key]
        return len(owned)


@dataclass
class FakeIdentityVerifier(IdentityVerifier):
    """Maps fixed tokens to identities."""

    identities: dict[str, Identity] = field(
        default_factory=lambda: {"user-token": USER, "admin-token": ADMIN}
    )

    def verify(self, token: str) -> Identity | None:
        return self.identities.get(token)


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed model answer."""

    response_text: str = field(
        default_factory=lambda: f"```json\n{json.dumps(APPLE_PAYLOAD)}\n```"
    )
    error: Exception | None = None
    calls: list[dict[str, str]] = field(default_factory=list)

    async def analyze(self, *, model: str, image_data_url: str, prompt: str) -> str:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "prompt": prompt}
        )
        if self.error is not None:
            raise self.error
        return self.response_text


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        admin_email="admin@example.com",
    )


@pytest.fixture
def scan_repository() -> InMemoryScanRepository:
    return InMemoryScanRepository()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(
    settings: Settings,
    scan_repository: InMemoryScanRepository,
    vision_client: FakeVisionClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_verifier=FakeIdentityVerifier(),
        rate_limiter=InMemoryRateLimiter(
            limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        quota_service=QuotaService(
            counter=scan_repository,
            admin_email=settings.admin_email,
            limit=settings.daily_scan_limit,
        ),
        vision_service=VisionService(client=vision_client, model=settings.openai_model),
        scan_service=ScanService(scan_repository),
        close_resources=close_resources,
    )
