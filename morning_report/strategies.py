"""
Data acquisition strategies.

A report is built either from search API queries (when a credential is
available) or from a fixed set of RSS/Atom feeds. Exactly one strategy
is chosen per report; both return one CategoryOutput per category and
treat a failing source as contributing nothing.
"""
import time
import logging
import requests
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from typing import Dict, List, Sequence

from morning_report.classifier import matches_category
from morning_report.dedup import MAX_ITEMS_PER_CATEGORY, rank
from morning_report.models import CategoryConfig, CategoryOutput, FeedSource, Item
from morning_report.normalizer import item_from_search_hit
from morning_report.recency import filter_recent, is_recent
from morning_report.rss_fetcher import FeedFetchError, RSSFetcher
from morning_report.search_client import (
    SearchAPIError,
    SearchAuthenticationError,
    SearchClient,
    SearchForbiddenError,
    SearchRateLimitError,
)

logger = logging.getLogger(__name__)


class SourceStrategy(ABC):
    """Produces per-category item lists for one report."""

    name = "base"

    @abstractmethod
    def collect(
        self,
        categories: Sequence[CategoryConfig],
        cutoff: datetime,
    ) -> Dict[str, CategoryOutput]:
        """
        Gather items for every category.

        Args:
            categories: Categories to fill, in report order
            cutoff: Oldest publish time still inside the window

        Returns:
            Mapping of category id to its output (one entry per category)
        """


class SearchAPIStrategy(SourceStrategy):
    """
    Fills each category from its own search queries.

    Queries run one at a time with a fixed pause after each, so the
    upstream never sees more than one in-flight request from a report.
    A rejected credential stops all remaining queries of the report.
    """

    name = "search"

    def __init__(
        self,
        client: SearchClient,
        top_k: int = 5,
        query_delay: float = 0.15,
        limit: int = MAX_ITEMS_PER_CATEGORY,
    ):
        self.client = client
        self.top_k = top_k
        self.query_delay = query_delay
        self.limit = limit
        self.stopped = False

    def collect(self, categories, cutoff):
        self.stopped = False
        out: Dict[str, CategoryOutput] = {}
        for category in categories:
            bucket = self._collect_category(category, cutoff)
            out[category.id] = CategoryOutput(items=tuple(bucket[: self.limit]))
            logger.info(f"Category '{category.id}': {len(out[category.id].items)} items")
        return out

    def _collect_category(self, category: CategoryConfig, cutoff: datetime) -> List[Item]:
        bucket: List[Item] = []
        seen = set()

        for query in category.queries:
            if self.stopped:
                break
            for hit in self._run_query(query):
                item = item_from_search_hit(hit)
                if item is None or not item.url:
                    continue
                if not is_recent(item, cutoff):
                    logger.debug(f"Outside window: {item.url} ({item.published_at})")
                    continue
                if item.url in seen:
                    continue
                seen.add(item.url)
                bucket.append(item)
            if not self.stopped:
                time.sleep(self.query_delay)

        return bucket

    def _run_query(self, query: str) -> list:
        try:
            return self.client.search(query, top_k=self.top_k)
        except (SearchAuthenticationError, SearchForbiddenError) as e:
            # Every further query would be rejected the same way
            logger.error(f"Search API refused the credential, stopping queries: {e}")
            self.stopped = True
            return []
        except SearchRateLimitError as e:
            logger.warning(f"Rate limited, skipping query {query!r}: {e}")
            return []
        except (SearchAPIError, requests.RequestException) as e:
            logger.warning(f"Skipping query {query!r}: {e}")
            return []


class FeedStrategy(SourceStrategy):
    """
    Pools items from all feeds once, then classifies them per category.
    """

    name = "feeds"

    def __init__(
        self,
        feeds: Sequence[FeedSource],
        fetcher: RSSFetcher = None,
        max_workers: int = 4,
        limit: int = MAX_ITEMS_PER_CATEGORY,
        deadline: float = 30,
    ):
        self.feeds = tuple(f for f in feeds if f.enabled)
        self.fetcher = fetcher or RSSFetcher()
        self.max_workers = max_workers
        self.deadline = deadline  # Seconds the whole pool may take
        self.limit = limit

    def collect(self, categories, cutoff):
        pool = self.fetch_pool()

        out: Dict[str, CategoryOutput] = {}
        for category in categories:
            candidates = [
                item for item in pool
                if item.url and matches_category(item, category.id)
            ]
            items = rank(filter_recent(candidates, cutoff), limit=self.limit)
            out[category.id] = CategoryOutput(items=tuple(items))
            logger.info(
                f"Category '{category.id}': {len(items)} items "
                f"({len(candidates)} matched before window/dedup)"
            )
        return out

    def fetch_pool(self) -> List[Item]:
        """
        Fetch every enabled feed concurrently and pool the parsed items.

        Feeds still downloading when the deadline passes contribute
        nothing; the report does not wait for them.

        Items keep feed order (feed list order, then document order).
        """
        if not self.feeds:
            return []

        pool: List[Item] = []
        workers = min(self.max_workers, len(self.feeds))
        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [
                (feed, executor.submit(self.fetcher.fetch_items, feed))
                for feed in self.feeds
            ]
            done, _ = wait([future for _, future in futures], timeout=self.deadline)

            for feed, future in futures:
                name = feed.label or feed.url
                if future not in done:
                    logger.warning(f"Skipping feed '{name}': no response within {self.deadline}s")
                    continue
                try:
                    pool.extend(future.result())
                except (FeedFetchError, requests.RequestException, ValueError) as e:
                    logger.warning(f"Skipping feed '{name}': {e}")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(f"Pooled {len(pool)} items from {len(self.feeds)} feeds")
        return pool
