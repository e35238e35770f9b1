"""Request payloads for the scan API."""

from pydantic import BaseModel, Field

from calorie_scanner.domain.scans import ScanResult


class ScanRequest(BaseModel):
    """Body of a scan submission."""

    image: str = ""
    context: str | None = None


class SaveScanRequest(BaseModel):
    """Body of the confirmation step that stores a scan result."""

    result: ScanResult
    context: str | None = Field(default=None, max_length=500)
