"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_scanner.adapters.openai_vision_client import OpenAIVisionClient
from calorie_scanner.adapters.supabase_auth_client import SupabaseIdentityVerifier
from calorie_scanner.adapters.supabase_scan_repository import SupabaseScanRepository
from calorie_scanner.config import Settings
from calorie_scanner.services.auth import IdentityVerifier
from calorie_scanner.services.quota import QuotaService
from calorie_scanner.services.rate_limit import InMemoryRateLimiter, RateLimiter
from calorie_scanner.services.scans import ScanService
from calorie_scanner.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_verifier: IdentityVerifier
    rate_limiter: RateLimiter
    quota_service: QuotaService
    vision_service: VisionService
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    scan_repository = SupabaseScanRepository(supabase_client)
    openai_client = (
        OpenAIVisionClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
    )
    quota_service = QuotaService(
        counter=scan_repository,
        admin_email=resolved_settings.admin_email,
        limit=resolved_settings.daily_scan_limit,
    )
    rate_limiter = InMemoryRateLimiter(
        limit=resolved_settings.rate_limit_requests,
        window_seconds=resolved_settings.rate_limit_window_seconds,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        identity_verifier=SupabaseIdentityVerifier(supabase_client),
        rate_limiter=rate_limiter,
        quota_service=quota_service,
        vision_service=vision_service,
        scan_service=ScanService(scan_repository),
        close_resources=close_resources,
    )
