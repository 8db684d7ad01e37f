"""
Normalization of raw source records into Item objects.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from morning_report.models import Item

logger = logging.getLogger(__name__)

# Source label used when nothing better can be derived from the URL
UNKNOWN_SOURCE = "kilde"


def safe_host(url: Optional[str]) -> str:
    """
    Derive a source label from a URL's hostname.

    Args:
        url: Absolute URL (may be None or garbage)

    Returns:
        Hostname without a leading "www.", or UNKNOWN_SOURCE if the URL
        has no scheme/host or cannot be parsed
    """
    if not url or not isinstance(url, str):
        return UNKNOWN_SOURCE
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
    except ValueError as e:
        logger.debug(f"Failed to parse URL '{url}': {e}")
        return UNKNOWN_SOURCE
    if not parsed.scheme or not host:
        return UNKNOWN_SOURCE
    if host.startswith("www."):
        host = host[len("www."):]
    return host or UNKNOWN_SOURCE


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def item_from_search_hit(hit: Dict[str, Any]) -> Optional[Item]:
    """
    Map a search API result to an Item.

    Title falls back to the URL, source comes from the URL host.

    Args:
        hit: One entry of the API's "results" list

    Returns:
        Item, or None if the hit is not a JSON object
    """
    if not isinstance(hit, dict):
        logger.debug(f"Ignoring non-object search hit: {hit!r}")
        return None

    url = _text(hit.get("url"))
    title = _text(hit.get("title")) or url
    published_at = _text(hit.get("published_at")) or None

    return Item(
        title=title,
        url=url,
        source=safe_host(url),
        published_at=published_at,
        tags=(),
    )


def with_feed_label(item: Item, label: Optional[str]) -> Item:
    """
    Resolve the source label of a parsed feed item.

    Precedence: feed label, then URL hostname, then UNKNOWN_SOURCE.
    """
    source = _text(label) or safe_host(item.url)
    return replace(item, source=source)
