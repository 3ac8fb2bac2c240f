# ==============================================================================
# Reporting Date Ranges
# ==============================================================================
"""
Named reporting windows for analytics queries.

Ranges are relative to "now" (wall clock), matching the dashboard presets.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)


class DateRange(str, Enum):
    """Supported reporting windows."""

    LAST_24_HOURS = "24h"
    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"

    @property
    def days(self) -> int:
        return _RANGE_DAYS[self]


_RANGE_DAYS = {
    DateRange.LAST_24_HOURS: 1,
    DateRange.LAST_7_DAYS: 7,
    DateRange.LAST_30_DAYS: 30,
    DateRange.LAST_90_DAYS: 90,
}

DEFAULT_RANGE = DateRange.LAST_7_DAYS


def parse_range(key: str | DateRange | None) -> DateRange:
    """Parse a range key, falling back to the 7 day window for unknown keys."""
    if isinstance(key, DateRange):
        return key
    try:
        return DateRange(key)
    except ValueError:
        logger.warning("Unknown date range %r, using %s", key, DEFAULT_RANGE.value)
        return DEFAULT_RANGE


def resolve_range(
    key: str | DateRange | None, now: datetime | None = None
) -> tuple[DateRange, datetime]:
    """
    Resolve a range key to its window start.

    Args:
        key: Range key ("24h", "7days", "30days", "90days")
        now: Reference time (defaults to current UTC time)

    Returns:
        Tuple of (DateRange, inclusive start of the window)
    """
    date_range = parse_range(key)
    now = now or datetime.now(timezone.utc)
    return date_range, now - timedelta(days=date_range.days)
