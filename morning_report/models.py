"""
Data models for the Cyber Morning Report aggregator.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


class LogLevel(Enum):
    """Valid log levels for aggregator configuration."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Item:
    """
    A single discovered piece of content (article, advisory, post).

    Produced by the markup parser or from a search API hit.
    """

    title: str
    url: str
    source: Optional[str] = None  # Human-readable origin label
    published_at: Optional[str] = None  # Raw timestamp string, None = unknown
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None  # HTML-stripped, entity-decoded

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON item shape."""
        data = {
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "published_at": self.published_at,
            "tags": list(self.tags),
        }
        if self.summary is not None:
            data["summary"] = self.summary
        return data


@dataclass(frozen=True)
class CategoryConfig:
    """
    A topical bucket of the report.

    Queries are only used by the search API strategy.
    """

    id: str
    title: str
    queries: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate configuration fields."""
        if not self.id:
            raise ValueError("CategoryConfig.id cannot be empty")
        if not self.title:
            raise ValueError("CategoryConfig.title cannot be empty")


@dataclass(frozen=True)
class FeedSource:
    """An RSS/Atom endpoint polled by the feed strategy."""

    url: str
    label: str = ""
    enabled: bool = True

    def __post_init__(self):
        if not self.url or not self.url.strip():
            raise ValueError("FeedSource.url cannot be empty")


@dataclass(frozen=True)
class CategoryOutput:
    """Bounded, earliest-discovered-first list of items for one category."""

    items: Tuple[Item, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class Report:
    """The output envelope of a single report generation."""

    generated_at: str  # ISO-8601 UTC
    window_hours: Union[int, float]
    categories: Mapping[str, CategoryOutput]
    titles: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON report shape."""
        return {
            "generated_at": self.generated_at,
            "window_hours": self.window_hours,
            "categories": {
                category_id: output.to_dict()
                for category_id, output in self.categories.items()
            },
            "meta": {"titles": dict(self.titles)},
        }


DEFAULT_SEARCH_API_URL = "https://api.perplexity.ai/search"
DEFAULT_USER_AGENT = "Cyber-Morning-Report/1.0"

DEFAULT_FEEDS: Tuple[FeedSource, ...] = (
    FeedSource(url="https://krebsonsecurity.com/feed/", label="Krebs"),
    FeedSource(url="https://feeds.feedburner.com/TheHackersNews", label="The Hacker News"),
    FeedSource(url="https://www.bleepingcomputer.com/feed/", label="BleepingComputer"),
)


@dataclass(frozen=True)
class AggregatorConfig:
    """
    Full aggregator configuration.

    Loaded from config.yaml, every field has a working default.
    Immutable (frozen) so a loaded config can be shared between report runs.
    """

    search_api_url: str = DEFAULT_SEARCH_API_URL
    feeds: Tuple[FeedSource, ...] = DEFAULT_FEEDS
    window_hours: Union[int, float] = 24
    max_items_per_category: int = 10
    search_top_k: int = 5
    query_delay_seconds: float = 0.15
    request_timeout: float = 15
    feed_deadline_seconds: float = 30  # Total time allowed for the feed pool
    max_workers: int = 4
    user_agent: str = DEFAULT_USER_AGENT
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self):
        """Validate configuration."""
        if not self.search_api_url:
            raise ValueError("AggregatorConfig.search_api_url cannot be empty")
        for name in ("max_items_per_category", "search_top_k", "max_workers"):
            value = getattr(self, name)
            if type(value) is not int or value < 1:
                raise ValueError(
                    f"AggregatorConfig.{name} must be a positive integer, got: {value}"
                )
        if self.query_delay_seconds < 0:
            raise ValueError("AggregatorConfig.query_delay_seconds cannot be negative")
        if self.request_timeout <= 0:
            raise ValueError("AggregatorConfig.request_timeout must be positive")
        if self.feed_deadline_seconds <= 0:
            raise ValueError("AggregatorConfig.feed_deadline_seconds must be positive")

    @property
    def enabled_feeds(self) -> Tuple[FeedSource, ...]:
        return tuple(f for f in self.feeds if f.enabled)
