"""Timezone resolution and local day boundaries."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "UTC"


def resolve_timezone(raw: str | None) -> str:
    """Return the IANA zone name if valid, otherwise UTC."""
    if not raw or not isinstance(raw, str):
        return DEFAULT_TIMEZONE
    try:
        ZoneInfo(raw)
    except Exception:
        return DEFAULT_TIMEZONE
    return raw


def local_day_start(timezone_name: str, now: datetime | None = None) -> datetime:
    """Return the UTC instant of local midnight today in the given zone.

    The zone offset is taken at the midnight instant itself, so a daylight
    saving transition later in the same day does not move the boundary.
    """
    tz = ZoneInfo(resolve_timezone(timezone_name))
    current = now or datetime.now(tz=UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    local_today = current.astimezone(tz).date()
    midnight_as_utc = datetime(
        local_today.year, local_today.month, local_today.day, tzinfo=UTC
    )
    return midnight_as_utc - _utc_offset_at(midnight_as_utc, tz)


def _utc_offset_at(instant: datetime, tz: ZoneInfo) -> timedelta:
    """Difference between wall-clock time in the zone and UTC at an instant."""
    local_wall = instant.astimezone(tz).replace(tzinfo=None)
    utc_wall = instant.astimezone(UTC).replace(tzinfo=None)
    return local_wall - utc_wall
