"""Domain models for the calorie scanner."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as reported by the auth provider."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class QuotaStatus:
    """Outcome of a daily quota check."""

    remaining: int
    is_admin: bool
    allowed: bool
    used: int | None = None
