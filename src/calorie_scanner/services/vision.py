"""Food analysis through an external vision-language model."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from calorie_scanner.domain.errors import (
    InvalidInput,
    MalformedResponse,
    Misconfiguration,
)
from calorie_scanner.domain.scans import ImagePayload, ScanResult
from calorie_scanner.services.prompting import build_prompt

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/heic",
        "image/heif",
    }
)

_DATA_URI = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)
_CODE_FENCE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)

logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for the external vision-language model."""

    async def analyze(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Return the model's raw text answer for an image and prompt."""


@dataclass
class VisionService:
    """Service that prompts the model and validates what comes back."""

    client: VisionClient | None
    model: str

    async def analyze(self, image: ImagePayload, context: str | None) -> ScanResult:
        """Analyze a food image; a single failed call is final."""
        if self.client is None:
            logger.error("OpenAI API key is not configured")
            raise Misconfiguration()
        raw_text = await self.client.analyze(
            model=self.model,
            image_data_url=image.to_data_url(),
            prompt=build_prompt(context),
        )
        return parse_scan_response(raw_text)


def parse_image_data_uri(value: str) -> ImagePayload:
    """Split a base64 data URI and check that it holds a supported image."""
    match = _DATA_URI.match(value.strip())
    if not match:
        raise InvalidInput("Invalid image format")
    mime_type = match.group(1).strip().lower()
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidInput("Unsupported image type")
    return ImagePayload(mime_type=mime_type, base64_data=match.group(2))


def strip_code_fences(raw_text: str) -> str:
    """Remove markdown code fences wrapped around a JSON answer."""
    return _CODE_FENCE.sub("", raw_text).strip()


def parse_scan_response(raw_text: str | None) -> ScanResult:
    """Parse and shape-check the model answer; never return a partial result."""
    if not raw_text:
        raise MalformedResponse("Model returned an empty response")
    cleaned = strip_code_fences(raw_text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Model response is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedResponse("Model response is not a JSON object")
    try:
        return ScanResult.model_validate(parsed)
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in err["loc"]) for err in exc.errors()}
        )
        raise MalformedResponse(
            f"Model response missing required fields: {', '.join(fields)}"
        ) from exc
