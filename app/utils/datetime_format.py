"""Display formatting for booking schedules."""

from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

# dd/MM/yyyy HH:mm:ss, as shown in booking listings
LISTING_FORMAT = "%d/%m/%Y %H:%M:%S"
# dd/MM/yyyy HH:mm, as sent in notifications
NOTIFICATION_FORMAT = "%d/%m/%Y %H:%M"


@lru_cache
def get_zone(name: str) -> ZoneInfo:
    """Resolve (and cache) an IANA timezone."""
    return ZoneInfo(name)


def format_schedule(value: datetime, timezone: str, fmt: str = LISTING_FORMAT) -> str:
    """Render an aware datetime in the given timezone.

    Args:
        value: Timezone-aware datetime
        timezone: IANA timezone name, e.g. 'America/Guayaquil'
        fmt: strftime format

    Returns:
        str: Formatted local time, e.g. '15/03/2026 05:00:00'
    """
    if value.tzinfo is None:
        raise ValueError("Cannot format a naive datetime")
    return value.astimezone(get_zone(timezone)).strftime(fmt)
