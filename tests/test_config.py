"""
Tests for Configuration Loader.

Tests loading and validating aggregator configuration.
"""
import pytest
import tempfile
from pathlib import Path

from morning_report.config import ConfigLoader, ConfigError
from morning_report.models import AggregatorConfig, DEFAULT_FEEDS, FeedSource, LogLevel


@pytest.fixture
def valid_config_yaml():
    """Valid configuration YAML."""
    return """
search_api_url: "https://api.search.test/search"
window_hours: 12
max_items_per_category: 5
search_top_k: 3
query_delay_seconds: 0.5
request_timeout: 10
feed_deadline_seconds: 20
max_workers: 2
user_agent: "TestBot/1.0"

feeds:
  - label: "Krebs"
    url: "https://krebsonsecurity.com/feed/"
    enabled: true

  - label: "NRK"
    url: "https://www.nrk.no/toppsaker.rss"

  - label: "Disabled"
    url: "https://disabled.test/feed"
    enabled: false

log_level: "debug"
"""


@pytest.fixture
def temp_config_file(valid_config_yaml):
    """Create a temporary config file."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.yaml') as f:
        f.write(valid_config_yaml)
        temp_path = Path(f.name)
    yield temp_path
    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


def _write(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    return path


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_load_valid_config(self, temp_config_file):
        """Test loading valid configuration."""
        config = ConfigLoader(temp_config_file).load()

        assert isinstance(config, AggregatorConfig)
        assert config.search_api_url == "https://api.search.test/search"
        assert config.window_hours == 12
        assert config.max_items_per_category == 5
        assert config.search_top_k == 3
        assert config.query_delay_seconds == 0.5
        assert config.request_timeout == 10
        assert config.feed_deadline_seconds == 20
        assert config.max_workers == 2
        assert config.user_agent == "TestBot/1.0"
        assert config.log_level == LogLevel.DEBUG

    def test_parse_feed_configs(self, temp_config_file):
        """Test parsing feed configurations."""
        config = ConfigLoader(temp_config_file).load()

        assert len(config.feeds) == 3
        feed1 = config.feeds[0]
        assert isinstance(feed1, FeedSource)
        assert feed1.label == "Krebs"
        assert feed1.url == "https://krebsonsecurity.com/feed/"
        assert config.feeds[1].enabled is True
        assert config.feeds[2].enabled is False

    def test_enabled_feeds_only(self, temp_config_file):
        """Test getting only enabled feeds."""
        config = ConfigLoader(temp_config_file).load()
        assert [f.label for f in config.enabled_feeds] == ["Krebs", "NRK"]

    def test_config_is_immutable(self, temp_config_file):
        """Test that loaded config cannot be modified."""
        config = ConfigLoader(temp_config_file).load()
        assert isinstance(config.feeds, tuple)
        with pytest.raises(AttributeError):
            config.window_hours = 1

    def test_missing_config_file_raises_error(self):
        """Test that missing config file raises error."""
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader(Path("nonexistent.yaml")).load()

    def test_invalid_yaml_raises_error(self, tmp_path):
        """Test that invalid YAML raises error."""
        path = _write(tmp_path, "invalid: yaml: content: [[[")
        with pytest.raises(ConfigError, match="Failed to parse"):
            ConfigLoader(path).load()

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test that an empty file gives the default configuration."""
        config = ConfigLoader(_write(tmp_path, "")).load()

        assert config.search_api_url == "https://api.perplexity.ai/search"
        assert config.feeds == DEFAULT_FEEDS
        assert config.window_hours == 24
        assert config.max_items_per_category == 10
        assert config.search_top_k == 5
        assert config.query_delay_seconds == 0.15
        assert config.log_level == LogLevel.INFO

    def test_non_mapping_raises_error(self, tmp_path):
        """Test that a YAML list is rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader(_write(tmp_path, "- a\n- b\n")).load()

    def test_empty_feeds_list_allowed(self, tmp_path):
        """Test that an explicit empty feed list is kept."""
        config = ConfigLoader(_write(tmp_path, "feeds: []\n")).load()
        assert config.feeds == ()

    def test_feed_missing_url_raises_error(self, tmp_path):
        """Test that a feed without url is rejected."""
        path = _write(tmp_path, 'feeds:\n  - label: "No URL"\n')
        with pytest.raises(ConfigError, match="Missing required field"):
            ConfigLoader(path).load()

    def test_invalid_feed_url_raises_error(self, tmp_path):
        """Test that invalid feed URLs raise error."""
        path = _write(tmp_path, 'feeds:\n  - label: "Bad"\n    url: "not-a-valid-url"\n')
        with pytest.raises(ConfigError, match="Invalid URL"):
            ConfigLoader(path).load()

    def test_file_scheme_rejected(self, tmp_path):
        """Test that non-HTTP schemes are rejected."""
        path = _write(tmp_path, 'feeds:\n  - url: "file:///etc/passwd"\n')
        with pytest.raises(ConfigError, match="Invalid URL"):
            ConfigLoader(path).load()

    @pytest.mark.parametrize("value", ['"false"', "0", "no-thanks"])
    def test_non_boolean_enabled_raises_error(self, tmp_path, value):
        """Test that a feed's enabled flag must be a real boolean."""
        path = _write(tmp_path, f'feeds:\n  - url: "https://a.test/feed"\n    enabled: {value}\n')
        with pytest.raises(ConfigError, match="enabled must be true or false"):
            ConfigLoader(path).load()

    def test_default_feed_deadline(self, tmp_path):
        """Test that the feed deadline defaults to thirty seconds."""
        config = ConfigLoader(_write(tmp_path, "window_hours: 6\n")).load()
        assert config.feed_deadline_seconds == 30

    def test_invalid_search_api_url(self, tmp_path):
        """Test that a bad search API URL is rejected."""
        path = _write(tmp_path, 'search_api_url: "ftp://search.test"\n')
        with pytest.raises(ConfigError, match="search_api_url"):
            ConfigLoader(path).load()

    def test_invalid_log_level(self, tmp_path):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ConfigError, match="Invalid log_level"):
            ConfigLoader(_write(tmp_path, "log_level: loud\n")).load()

    @pytest.mark.parametrize("content,key", [
        ("window_hours: 0\n", "window_hours"),
        ("window_hours: many\n", "window_hours"),
        ("max_items_per_category: 0\n", "max_items_per_category"),
        ("search_top_k: 2.5\n", "search_top_k"),
        ("max_workers: -1\n", "max_workers"),
        ("query_delay_seconds: -1\n", "query_delay_seconds"),
        ("request_timeout: 0\n", "request_timeout"),
        ("feed_deadline_seconds: 0\n", "feed_deadline_seconds"),
        ("feed_deadline_seconds: soon\n", "feed_deadline_seconds"),
    ])
    def test_invalid_numbers(self, tmp_path, content, key):
        """Test that out-of-range numeric settings are rejected."""
        with pytest.raises(ConfigError, match=key):
            ConfigLoader(_write(tmp_path, content)).load()

    def test_load_from_env_override(self, temp_config_file, monkeypatch):
        """Test that environment variables can override config values."""
        monkeypatch.setenv("SEARCH_API_URL", "https://override.test/search")

        config = ConfigLoader(temp_config_file).load()

        assert config.search_api_url == "https://override.test/search"
