"""
RSS/Atom feed fetcher.

Downloads raw feed text over HTTP and hands it to the markup parser.
There is no retry: a feed that fails is skipped for this report.
"""
import logging
import requests
from typing import List, Optional

from morning_report.markup_parser import parse_rss_or_atom
from morning_report.models import DEFAULT_USER_AGENT, FeedSource, Item
from morning_report.normalizer import with_feed_label

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """Raised when a feed cannot be downloaded."""

    def __init__(self, message: str, url: str, status_code: int = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RSSFetcher:
    """
    Fetches RSS/Atom feeds and parses them into Items.

    Features:
    - Configurable request timeout
    - Custom User-Agent header (some feed hosts reject the requests default)
    - Items are labelled with the feed's display label
    """

    def __init__(
        self,
        timeout: float = 15,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize RSS fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: Custom User-Agent string
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    def fetch_text(self, url: str) -> str:
        """
        Download a feed document.

        Args:
            url: Feed URL

        Returns:
            Response body as text

        Raises:
            ValueError: If URL is empty
            FeedFetchError: On a non-success status
            requests.RequestException: On network errors and timeouts
        """
        if not url:
            raise ValueError("URL cannot be empty")

        logger.info(f"Fetching feed from {url}")
        headers = {"User-Agent": self.user_agent}
        response = requests.get(url, timeout=self.timeout, headers=headers)

        if not response.ok:
            raise FeedFetchError(
                f"Feed request failed ({response.status_code}): {url}",
                url=url,
                status_code=response.status_code,
            )
        return response.text

    def fetch_items(self, source: FeedSource) -> List[Item]:
        """
        Fetch and parse one feed source.

        Args:
            source: Feed to fetch

        Returns:
            Parsed items labelled with the feed's label

        Raises:
            FeedFetchError, requests.RequestException: See fetch_text
        """
        xml = self.fetch_text(source.url)
        items = [with_feed_label(item, source.label) for item in parse_rss_or_atom(xml)]
        logger.info(f"Parsed {len(items)} items from {source.label or source.url}")
        return items
