"""Tests for crawler configuration."""

import json
import logging

import pytest

from sitegraph.config import CrawlerConfig
from sitegraph.constants import (
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    SNAPSHOT_INTERVAL_PAGES,
)


class TestCrawlerConfig:
    """Tests for CrawlerConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CrawlerConfig()

        assert config.timeout == DEFAULT_REQUEST_TIMEOUT_SECONDS
        assert config.max_concurrent == DEFAULT_MAX_CONCURRENT_REQUESTS
        assert config.max_retries == 0
        assert config.snapshot_interval == SNAPSHOT_INTERVAL_PAGES
        assert config.record_cross_links is False

    @pytest.mark.parametrize("kwargs", [
        {"max_concurrent": 0},
        {"max_retries": -1},
        {"snapshot_interval": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CrawlerConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        """SITEGRAPH_ variables override defaults with the right types."""
        monkeypatch.setenv("SITEGRAPH_MAX_CONCURRENT", "4")
        monkeypatch.setenv("SITEGRAPH_TIMEOUT", "12.5")
        monkeypatch.setenv("SITEGRAPH_RECORD_CROSS_LINKS", "true")
        monkeypatch.setenv("SITEGRAPH_USER_AGENT", "EnvBot/2.0")

        config = CrawlerConfig.from_env()

        assert config.max_concurrent == 4
        assert config.timeout == 12.5
        assert config.record_cross_links is True
        assert config.user_agent == "EnvBot/2.0"

    def test_from_env_ignores_bad_values(self, monkeypatch, caplog):
        monkeypatch.setenv("SITEGRAPH_MAX_RETRIES", "several")

        with caplog.at_level(logging.WARNING, logger="sitegraph.config"):
            config = CrawlerConfig.from_env()

        assert config.max_retries == 0
        assert "SITEGRAPH_MAX_RETRIES" in caplog.text

    def test_from_file(self, tmp_path):
        """Settings may sit under a "crawler" key; unknown keys are ignored."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"crawler": {"max_retries": 3, "excerpt_length": 500, "other": 1}}))

        config = CrawlerConfig.from_file(str(path))

        assert config.max_retries == 3
        assert config.excerpt_length == 500

    def test_from_file_top_level(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"snapshot_interval": 10}))

        assert CrawlerConfig.from_file(str(path)).snapshot_interval == 10

    def test_from_missing_file(self, tmp_path):
        assert CrawlerConfig.from_file(str(tmp_path / "absent.json")) == CrawlerConfig()

    def test_to_dict(self):
        data = CrawlerConfig(max_concurrent=3).to_dict()

        assert data["max_concurrent"] == 3
        assert set(data) == {
            "user_agent", "timeout", "max_concurrent", "max_retries",
            "snapshot_interval", "excerpt_length", "record_cross_links",
        }
