"""
Recency window filtering.

Fail-open: an item is only dropped when its timestamp parses and is
older than the cutoff. Missing or unreadable timestamps are kept.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union

from dateutil import parser as date_parser

from morning_report.models import Item

logger = logging.getLogger(__name__)

EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def cutoff_for(window_hours: Union[int, float], now: Optional[datetime] = None) -> datetime:
    """
    Compute the oldest instant still inside the window.

    Args:
        window_hours: Window size in hours
        now: Reference time (defaults to current UTC time)

    Returns:
        Timezone-aware UTC datetime
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        return now - timedelta(hours=window_hours)
    except OverflowError:
        # Window reaches past the representable range: everything is in window
        logger.debug(f"Window of {window_hours}h exceeds datetime range, no cutoff")
        return EARLIEST


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 822 / ISO 8601 (or similar) timestamp.

    Naive results are assumed to be UTC.

    Returns:
        Aware datetime, or None if the value is empty or unparseable
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug(f"Unparseable timestamp '{value}': {e}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_recent(item: Item, cutoff: datetime) -> bool:
    """Return True unless the item has a parseable timestamp before cutoff."""
    published = parse_timestamp(item.published_at)
    if published is None:
        return True
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    return published >= cutoff


def filter_recent(items: Iterable[Item], cutoff: datetime) -> List[Item]:
    """Keep items inside the window, preserving order."""
    return [item for item in items if is_recent(item, cutoff)]
