"""Error taxonomy for the scan API.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Root causes stay in the server logs.
"""


class ScanError(Exception):
    """Base class for errors converted into JSON error responses."""

    status_code = 500
    public_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class Unauthenticated(ScanError):
    """Missing or invalid bearer credential."""

    status_code = 401
    public_message = "Unauthorized"


class RateLimited(ScanError):
    """Per-minute request ceiling exceeded."""

    status_code = 429
    public_message = "Rate limit exceeded"


class QuotaExceeded(ScanError):
    """Daily scan ceiling exceeded."""

    status_code = 429

    def __init__(self, limit: int) -> None:
        super().__init__(f"Daily scan limit reached ({limit} per day)")
        self.limit = limit


class InvalidInput(ScanError):
    """Malformed request body, image or context."""

    status_code = 400
    public_message = "Invalid request"


class PayloadTooLarge(InvalidInput):
    """Request body or image exceeds the size guard."""

    status_code = 413
    public_message = "Image too large"


class ScanNotFound(ScanError):
    """Scan record does not exist or belongs to another user."""

    status_code = 404
    public_message = "Scan not found"


class MalformedResponse(ScanError):
    """External model output failed parsing or shape validation."""

    status_code = 500
    public_message = "Scan failed. Please try again."

    def __init__(self, reason: str) -> None:
        super().__init__(self.public_message)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class Misconfiguration(ScanError):
    """A required server secret is missing."""

    status_code = 500
    public_message = "Server misconfiguration"
