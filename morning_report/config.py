"""
Configuration Loader for the Cyber Morning Report aggregator.

Loads and validates configuration from YAML files.
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict
import yaml
from urllib.parse import urlparse

from morning_report.models import (
    AggregatorConfig,
    DEFAULT_FEEDS,
    DEFAULT_SEARCH_API_URL,
    DEFAULT_USER_AGENT,
    FeedSource,
    LogLevel,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration error."""

    pass


class ConfigLoader:
    """
    Loads and validates aggregator configuration.

    Supports:
    - Loading from YAML file
    - Environment variable overrides (SEARCH_API_URL)
    - Defaults for every field not present in the file
    - URL validation
    """

    def __init__(self, config_path: Path):
        """
        Initialize config loader.

        Args:
            config_path: Path to config.yaml file
        """
        self.config_path = Path(config_path)

    def load(self) -> AggregatorConfig:
        """
        Load and validate configuration.

        Returns:
            AggregatorConfig object

        Raises:
            ConfigError: If config is invalid or missing
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML: {e}")

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError("Configuration file must contain a mapping")

        try:
            return self._parse_config(config_data)
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}")

    def _parse_config(self, data: Dict[str, Any]) -> AggregatorConfig:
        """
        Parse and validate configuration data.

        Args:
            data: Parsed YAML data

        Returns:
            AggregatorConfig object

        Raises:
            ConfigError: If validation fails
        """
        search_api_url = os.getenv(
            "SEARCH_API_URL", data.get("search_api_url", DEFAULT_SEARCH_API_URL)
        )
        if not self._is_valid_url(search_api_url):
            raise ConfigError(f"Invalid URL for search_api_url: {search_api_url}")

        log_level_str = str(data.get("log_level", "info")).lower()
        try:
            log_level = LogLevel(log_level_str)
        except ValueError:
            valid_levels = [level.value for level in LogLevel]
            raise ConfigError(f"Invalid log_level '{log_level_str}'. Valid values: {valid_levels}")

        if "feeds" in data:
            feeds_data = data.get("feeds") or []
            if not isinstance(feeds_data, list):
                raise ConfigError("feeds must be a list")
            feeds = tuple(self._parse_feed(feed_data) for feed_data in feeds_data)
        else:
            feeds = DEFAULT_FEEDS

        window_hours = data.get("window_hours", 24)
        if isinstance(window_hours, bool) or not isinstance(window_hours, (int, float)) or window_hours <= 0:
            raise ConfigError(f"window_hours must be a positive number, got: {window_hours}")

        for key in ("max_items_per_category", "search_top_k", "max_workers"):
            value = data.get(key)
            if value is not None and (type(value) is not int or value < 1):
                raise ConfigError(f"{key} must be a positive integer, got: {value}")

        query_delay = data.get("query_delay_seconds", 0.15)
        if isinstance(query_delay, bool) or not isinstance(query_delay, (int, float)) or query_delay < 0:
            raise ConfigError(f"query_delay_seconds must be a non-negative number, got: {query_delay}")

        request_timeout = data.get("request_timeout", 15)
        if isinstance(request_timeout, bool) or not isinstance(request_timeout, (int, float)) or request_timeout <= 0:
            raise ConfigError(f"request_timeout must be a positive number, got: {request_timeout}")

        feed_deadline = data.get("feed_deadline_seconds", 30)
        if isinstance(feed_deadline, bool) or not isinstance(feed_deadline, (int, float)) or feed_deadline <= 0:
            raise ConfigError(f"feed_deadline_seconds must be a positive number, got: {feed_deadline}")

        enabled_count = sum(1 for f in feeds if f.enabled)
        logger.info(f"Loaded configuration with {len(feeds)} feeds ({enabled_count} enabled)")

        return AggregatorConfig(
            search_api_url=search_api_url,
            feeds=feeds,
            window_hours=window_hours,
            max_items_per_category=data.get("max_items_per_category", 10),
            search_top_k=data.get("search_top_k", 5),
            query_delay_seconds=query_delay,
            request_timeout=request_timeout,
            feed_deadline_seconds=feed_deadline,
            max_workers=data.get("max_workers", 4),
            user_agent=data.get("user_agent") or DEFAULT_USER_AGENT,
            log_level=log_level,
        )

    def _parse_feed(self, data: Dict[str, Any]) -> FeedSource:
        """
        Parse and validate a single feed configuration.

        Args:
            data: Feed configuration data

        Returns:
            FeedSource object

        Raises:
            ConfigError: If validation fails
        """
        if not isinstance(data, dict) or "url" not in data:
            raise ConfigError("Missing required field in feed config: url")

        url = data["url"]
        label = data.get("label") or ""
        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigError(f"enabled must be true or false for feed '{label or url}', got: {enabled!r}")

        if not self._is_valid_url(url):
            raise ConfigError(f"Invalid URL for feed '{label or url}': {url}")

        return FeedSource(url=url.strip(), label=label.strip(), enabled=enabled)

    def _is_valid_url(self, url: str) -> bool:
        """
        Validate URL format.

        Only allows http and https schemes.

        Args:
            url: URL to validate

        Returns:
            True if valid HTTP/HTTPS URL, False otherwise
        """
        if not isinstance(url, str):
            return False
        try:
            result = urlparse(url)
            if result.scheme not in ("http", "https"):
                logger.warning(f"URL has invalid scheme '{result.scheme}': {url}")
                return False
            return bool(result.netloc)
        except ValueError as e:
            logger.warning(f"Failed to parse URL '{url}': {e}")
            return False
