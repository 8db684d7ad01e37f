"""
Best-effort RSS/Atom scraper.

Works on raw feed text with pattern matching instead of a strict XML
parser, so truncated or invalid documents still yield whatever items
can be recognized. RSS <item> and Atom <entry> blocks may appear in the
same document; both are collected.
"""
import re
import logging
import warnings
from typing import List, Optional

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from morning_report.models import Item

logger = logging.getLogger(__name__)

RSS_ITEM_RE = re.compile(r"<item\b[\s\S]*?</item>", re.IGNORECASE)
ATOM_ENTRY_RE = re.compile(r"<entry\b[\s\S]*?</entry>", re.IGNORECASE)
ATOM_LINK_HREF_RE = re.compile(
    r"""<link[^>]*href=["']([^"']+)["'][^>]*>""", re.IGNORECASE
)
CDATA_RE = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")


def _clean_text(raw: str) -> str:
    """Strip markup and decode entities from an element's inner text."""
    text = CDATA_RE.sub(lambda m: m.group(1), raw)
    if "<" not in text and "&" not in text:
        return text.strip()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(text, "html.parser")
    return soup.get_text().strip()


def pick(block: str, tag: str) -> str:
    """
    Extract the text of the first <tag> element in a block.

    Args:
        block: Markup of a single RSS item or Atom entry
        tag: Element name (matched case-insensitively)

    Returns:
        Cleaned inner text, or "" if the element is missing
    """
    pattern = re.compile(
        rf"<{re.escape(tag)}[^>]*>([\s\S]*?)</{re.escape(tag)}>", re.IGNORECASE
    )
    match = pattern.search(block)
    if not match:
        return ""
    return _clean_text(match.group(1))


def _first(*values: str) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def _parse_rss_item(block: str) -> Item:
    return Item(
        title=pick(block, "title"),
        url=pick(block, "link"),
        published_at=pick(block, "pubDate") or None,
        summary=pick(block, "description"),
        tags=(),
    )


def _parse_atom_entry(block: str) -> Item:
    href = ATOM_LINK_HREF_RE.search(block)
    link = href.group(1).strip() if href else ""
    return Item(
        title=pick(block, "title"),
        url=link or pick(block, "id"),
        published_at=_first(pick(block, "updated"), pick(block, "published")),
        summary=pick(block, "summary") or pick(block, "content"),
        tags=(),
    )


def parse_rss_or_atom(xml: str) -> List[Item]:
    """
    Extract items from RSS and/or Atom markup.

    Never raises on malformed input; a block that cannot be handled is
    skipped. Items missing both title and url are dropped.

    Args:
        xml: Raw feed text

    Returns:
        RSS items followed by Atom entries, in document order
    """
    if not isinstance(xml, str) or not xml:
        return []

    items: List[Item] = []
    for block_re, parse_block in (
        (RSS_ITEM_RE, _parse_rss_item),
        (ATOM_ENTRY_RE, _parse_atom_entry),
    ):
        for match in block_re.finditer(xml):
            try:
                item = parse_block(match.group(0))
            except Exception as e:
                logger.warning(f"Skipping unparseable feed block: {e}")
                continue
            if item.title or item.url:
                items.append(item)

    logger.debug(f"Parsed {len(items)} items from {len(xml)} characters of markup")
    return items
