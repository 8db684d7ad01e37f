"""
Keyword classifier assigning items to report categories.

Matching is case-insensitive substring search over title and summary.
An item can belong to any number of categories.
"""
import re
import logging
from types import MappingProxyType
from typing import Mapping

from morning_report.models import Item

logger = logging.getLogger(__name__)


CATEGORY_PATTERNS: Mapping[str, re.Pattern] = MappingProxyType({
    "norway_incidents": re.compile(
        r"(norway|norge|norwegian|nsm|oslo|bergen|trondheim|stavanger)"
    ),
    "key_reports": re.compile(r"(report|whitepaper|trusselvurdering|annual|trend)"),
    "cyberforsvaret_social": re.compile(
        r"(cyberforsvaret|norwegian armed forces cyber defence|cyfor)"
    ),
    "milno_targeting": re.compile(r"(mil\.no)"),
    "cyberforsvaret_media": re.compile(r"(cyberforsvaret)"),
    "mil_ops_analysis": re.compile(
        r"(offensive cyber|defensive cyber|military operations|doktrine"
        r"|electronic warfare|ew)"
    ),
})

# Applies to world_major_incidents and any id without its own pattern
DEFAULT_PATTERN: re.Pattern = re.compile(
    r"(ransomware|ddos|sårbarhet|vulnerability|intrusion|breach|cisa|cert)"
)

# Categories that additionally require the source label to match
SOURCE_PATTERNS: Mapping[str, re.Pattern] = MappingProxyType({
    "cyberforsvaret_media": re.compile(r"(nrk|aftenposten|vg|dagbladet|dn\.no|e24)"),
})


def _item_text(item: Item) -> str:
    return f"{item.title or ''} {item.summary or ''}".lower()


def matches_category(item: Item, category_id: str) -> bool:
    """
    Decide whether an item belongs to a category.

    Args:
        item: Item to classify
        category_id: Category id from the category table (unknown ids
            fall back to the default incident keywords)

    Returns:
        True if the item matches the category predicate
    """
    pattern = CATEGORY_PATTERNS.get(category_id, DEFAULT_PATTERN)
    if not pattern.search(_item_text(item)):
        return False

    source_pattern = SOURCE_PATTERNS.get(category_id)
    if source_pattern and not source_pattern.search((item.source or "").lower()):
        logger.debug(f"Source '{item.source}' not allowed for {category_id}: {item.url}")
        return False

    return True
