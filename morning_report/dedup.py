"""
Deduplication and truncation of per-category item lists.
"""
from typing import Iterable, List, Optional, Set

from morning_report.models import Item

MAX_ITEMS_PER_CATEGORY = 10


def dedupe_key(item: Item) -> Optional[str]:
    """Identity of an item: its url, else its title, else None."""
    return item.url or item.title or None


def deduplicate(items: Iterable[Item]) -> List[Item]:
    """
    Remove duplicates by url (falling back to title).

    Keeps the first occurrence and preserves original order. Items with
    neither url nor title are dropped.
    """
    seen: Set[str] = set()
    out: List[Item] = []

    for item in items:
        key = dedupe_key(item)
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def rank(items: Iterable[Item], limit: int = MAX_ITEMS_PER_CATEGORY) -> List[Item]:
    """Deduplicate and keep the first `limit` survivors in discovery order."""
    return deduplicate(items)[:limit]
