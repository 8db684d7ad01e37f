"""
Report assembly.

Resolves the time window, picks the acquisition strategy and builds the
report envelope. Everything is rebuilt from scratch on each call.
"""
import math
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Union

from morning_report.categories import CATEGORY_CONFIG
from morning_report.models import AggregatorConfig, CategoryConfig, CategoryOutput, Report
from morning_report.recency import cutoff_for
from morning_report.rss_fetcher import RSSFetcher
from morning_report.search_client import SearchClient
from morning_report.strategies import FeedStrategy, SearchAPIStrategy, SourceStrategy

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 24


def resolve_window_hours(raw: Any, default: Union[int, float] = DEFAULT_WINDOW_HOURS) -> Union[int, float]:
    """
    Interpret caller-supplied window size.

    Missing, non-numeric, non-finite or negative input falls back to the
    default. Integral values are returned as int.

    Args:
        raw: Value from the caller (str, number or None)
        default: Fallback window in hours

    Returns:
        Window size in hours
    """
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return default
    try:
        hours = float(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid window hours {raw!r}, using {default}")
        return default
    if not math.isfinite(hours) or hours < 0:
        logger.warning(f"Invalid window hours {raw!r}, using {default}")
        return default
    return int(hours) if hours.is_integer() else hours


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def select_strategy(
    api_key: Optional[str],
    config: AggregatorConfig,
    search_client: Optional[SearchClient] = None,
    fetcher: Optional[RSSFetcher] = None,
) -> SourceStrategy:
    """
    Choose the acquisition strategy for one report.

    The search API is used whenever a credential is present, feeds otherwise.
    """
    if api_key or search_client is not None:
        client = search_client or SearchClient(
            api_key=api_key,
            api_url=config.search_api_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
        return SearchAPIStrategy(
            client,
            top_k=config.search_top_k,
            query_delay=config.query_delay_seconds,
            limit=config.max_items_per_category,
        )

    return FeedStrategy(
        config.feeds,
        fetcher=fetcher or RSSFetcher(
            timeout=config.request_timeout, user_agent=config.user_agent
        ),
        max_workers=config.max_workers,
        limit=config.max_items_per_category,
        deadline=config.feed_deadline_seconds,
    )


class ReportAssembler:
    """
    Builds morning reports.

    Holds only read-only configuration; each generate() call works on
    its own data.
    """

    def __init__(
        self,
        config: Optional[AggregatorConfig] = None,
        api_key: Optional[str] = None,
        categories: Sequence[CategoryConfig] = CATEGORY_CONFIG,
        search_client: Optional[SearchClient] = None,
        fetcher: Optional[RSSFetcher] = None,
    ):
        """
        Initialize assembler.

        Args:
            config: Aggregator configuration (defaults if omitted)
            api_key: Search API key; selects the search strategy when set
            categories: Category table to report on
            search_client: Optional SearchClient (for testing)
            fetcher: Optional RSSFetcher (for testing)
        """
        self.config = config or AggregatorConfig()
        self.api_key = api_key
        self.categories = tuple(categories)
        self.search_client = search_client
        self.fetcher = fetcher

    def generate(self, hours: Any = None, now: Optional[datetime] = None) -> Report:
        """
        Generate one report.

        Args:
            hours: Window size from the caller (defaults to the configured window)
            now: Reference time (defaults to current UTC time)

        Returns:
            Report with one entry per configured category
        """
        if now is None:
            now = datetime.now(timezone.utc)
        window_hours = resolve_window_hours(hours, default=self.config.window_hours)
        cutoff = cutoff_for(window_hours, now=now)

        strategy = select_strategy(
            self.api_key,
            self.config,
            search_client=self.search_client,
            fetcher=self.fetcher,
        )
        logger.info(
            f"Generating report: window={window_hours}h, strategy={strategy.name}, "
            f"{len(self.categories)} categories"
        )

        collected = strategy.collect(self.categories, cutoff)
        categories = {
            category.id: collected.get(category.id, CategoryOutput())
            for category in self.categories
        }

        return Report(
            generated_at=format_timestamp(now),
            window_hours=window_hours,
            categories=categories,
            titles={category.id: category.title for category in self.categories},
        )


def generate_report(
    hours: Any = None,
    api_key: Optional[str] = None,
    config: Optional[AggregatorConfig] = None,
    now: Optional[datetime] = None,
    **kwargs,
) -> Report:
    """Convenience wrapper: build a ReportAssembler and generate one report."""
    return ReportAssembler(config=config, api_key=api_key, **kwargs).generate(hours, now=now)
