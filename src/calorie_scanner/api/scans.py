"""Scan endpoints: quota check, analysis and history."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Request, Response, status
from pydantic import ValidationError

from calorie_scanner.api.auth import require_identity
from calorie_scanner.api.models import SaveScanRequest, ScanRequest
from calorie_scanner.domain.errors import (
    InvalidInput,
    MalformedResponse,
    PayloadTooLarge,
    RateLimited,
    ScanError,
)
from calorie_scanner.domain.models import Identity  # noqa: TC001
from calorie_scanner.services.prompting import MAX_CONTEXT_LENGTH, sanitize_context
from calorie_scanner.services.scans import HistoryPeriod  # noqa: TC001
from calorie_scanner.services.timezones import resolve_timezone
from calorie_scanner.services.vision import parse_image_data_uri

if TYPE_CHECKING:
    from calorie_scanner.containers import AppContainer

router = APIRouter(prefix="/api", tags=["scans"])
logger = logging.getLogger(__name__)


@router.get("/scan-limit")
async def scan_limit(
    request: Request,
    identity: Identity = Depends(require_identity),
    x_timezone: str | None = Header(default=None),
) -> dict[str, object]:
    """Return how many scans the caller has left today."""
    container: AppContainer = request.app.state.container
    try:
        quota = container.quota_service.check(identity, resolve_timezone(x_timezone))
    except Exception as exc:
        logger.exception("Scan limit check failed", extra={"user_id": identity.id})
        raise ScanError("Failed to check scan limit") from exc
    return {"remaining": quota.remaining, "isAdmin": quota.is_admin}


@router.post("/scan")
async def scan(
    request: Request,
    identity: Identity = Depends(require_identity),
    x_timezone: str | None = Header(default=None),
) -> dict[str, object]:
    """Analyze a food photo and return the validated estimate."""
    container: AppContainer = request.app.state.container
    settings = container.settings
    if container.rate_limiter.hit(identity.id):
        logger.info("Rate limit exceeded", extra={"user_id": identity.id})
        raise RateLimited()
    if _content_length(request) > settings.max_request_bytes:
        raise PayloadTooLarge("Request too large")

    timezone = resolve_timezone(x_timezone)
    try:
        container.quota_service.enforce(identity, timezone)
    except ScanError:
        raise
    except Exception as exc:
        logger.exception("Quota check failed", extra={"user_id": identity.id})
        raise ScanError("Scan failed. Please try again.") from exc

    try:
        raw_body = await _read_body(request, settings.max_request_bytes)
        body = ScanRequest.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as exc:
        raise InvalidInput("Invalid request body") from exc
    if not body.image:
        raise InvalidInput("No image provided")
    if len(body.image) > settings.max_image_chars:
        raise PayloadTooLarge("Image too large")
    if body.context and len(body.context) > MAX_CONTEXT_LENGTH:
        raise InvalidInput("Context too long (max 500 characters)")
    image = parse_image_data_uri(body.image)
    context = sanitize_context(body.context)

    try:
        result = await container.vision_service.analyze(image, context)
    except MalformedResponse as exc:
        logger.warning(
            "Rejected model response: %s", exc.reason, extra={"user_id": identity.id}
        )
        raise
    except ScanError:
        raise
    except Exception as exc:
        logger.exception("Vision analysis failed", extra={"user_id": identity.id})
        raise ScanError("Scan failed. Please try again.") from exc
    return result.to_json()


@router.post("/scans", status_code=status.HTTP_201_CREATED)
async def save_scan(
    payload: SaveScanRequest,
    request: Request,
    identity: Identity = Depends(require_identity),
) -> dict[str, object]:
    """Store a scan result the user confirmed."""
    container: AppContainer = request.app.state.container
    record = container.scan_service.save(identity.id, payload.result, payload.context)
    return record.to_json()


@router.get("/scans")
async def list_scans(
    request: Request,
    identity: Identity = Depends(require_identity),
    period: HistoryPeriod | None = None,
) -> dict[str, object]:
    """Return the caller's scan history, newest first."""
    container: AppContainer = request.app.state.container
    scans = container.scan_service.history(identity.id, period)
    return {"scans": [scan.to_json() for scan in scans]}


@router.delete("/scans/{scan_id}")
async def delete_scan(
    scan_id: UUID,
    request: Request,
    identity: Identity = Depends(require_identity),
) -> Response:
    """Delete one of the caller's scans."""
    container: AppContainer = request.app.state.container
    container.scan_service.delete(identity.id, scan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/scans")
async def clear_history(
    request: Request,
    identity: Identity = Depends(require_identity),
) -> dict[str, int]:
    """Delete every scan the caller owns."""
    container: AppContainer = request.app.state.container
    return {"deleted": container.scan_service.clear_history(identity.id)}


async def _read_body(request: Request, limit: int) -> bytes:
    """Read the body, failing once it grows past `limit` bytes."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLarge("Request too large")
    return bytes(body)


def _content_length(request: Request) -> int:
    raw = request.headers.get("content-length")
    if raw is None or not raw.strip().isdigit():
        return 0
    return int(raw)
