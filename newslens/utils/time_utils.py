"""
Time helpers: time-window cutoffs and feed timestamp handling.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

from newslens.models import TimeWindow

WINDOW_DELTAS = {
    TimeWindow.LAST_24H: timedelta(hours=24),
    TimeWindow.LAST_7D: timedelta(days=7),
    TimeWindow.LAST_30D: timedelta(days=30),
}

# Zone marker appended to every stored time of day
ZONE_MARKER = '+00'


def cutoff(window: Union[TimeWindow, str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Map a time window to the earliest instant it includes.

    Args:
        window: TimeWindow or its string value ('24h', '7d', '30d', 'all')
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        Cutoff instant, or None for the all-time window
    """
    window = TimeWindow.from_value(window)
    if window is TimeWindow.ALL_TIME:
        return None
    now = now or datetime.now(timezone.utc)
    return now - WINDOW_DELTAS[window]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a feed timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC. Returns None when the value is
    missing, cannot be parsed, or falls outside the representable range
    once shifted to UTC.
    """
    if not value:
        return None

    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def format_time_of_day(moment: datetime) -> str:
    """Render the time of day of ``moment`` as 'HH:MM:SS+00'."""
    return f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}{ZONE_MARKER}"


def to_naive_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Convert to a naive UTC datetime for storage and comparisons."""
    if moment is None:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(tzinfo=None)


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive datetime read back from the store."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
