from dotenv import load_dotenv
from dataclasses import dataclass
from pathlib import Path
import json
import logging
import os

from sitegraph.constants import (
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    PAGE_EXCERPT_LENGTH,
    SNAPSHOT_INTERVAL_PAGES,
)

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    USER_AGENT = os.getenv("SITEGRAPH_USER_AGENT", DEFAULT_USER_AGENT)
    LOG_LEVEL = os.getenv("SITEGRAPH_LOG_LEVEL", "INFO")


settings = Settings()


@dataclass
class CrawlerConfig:
    """Runtime configuration for the traversal engine and its fetcher."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    max_concurrent: int = DEFAULT_MAX_CONCURRENT_REQUESTS
    max_retries: int = DEFAULT_MAX_RETRIES
    snapshot_interval: int = SNAPSHOT_INTERVAL_PAGES
    excerpt_length: int = PAGE_EXCERPT_LENGTH
    record_cross_links: bool = False

    def __post_init__(self):
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if self.snapshot_interval < 1:
            raise ValueError("snapshot_interval must be at least 1")

    @classmethod
    def from_env(cls) -> "CrawlerConfig":
        """Load configuration from environment variables.

        Environment variables are prefixed with SITEGRAPH_,
        e.g. SITEGRAPH_MAX_CONCURRENT=4

        Returns:
            CrawlerConfig with values from environment
        """
        config = cls(user_agent=settings.USER_AGENT)
        prefix = "SITEGRAPH_"

        for field_name, field_def in config.__dataclass_fields__.items():
            env_value = os.getenv(f"{prefix}{field_name.upper()}")
            if env_value is None:
                continue

            try:
                if field_def.type in (bool, "bool"):
                    value = env_value.strip().lower() in ("1", "true", "yes", "on")
                elif field_def.type in (int, "int"):
                    value = int(env_value)
                elif field_def.type in (float, "float"):
                    value = float(env_value)
                else:
                    value = env_value
            except ValueError:
                logger.warning(f"Ignoring invalid value for {prefix}{field_name.upper()}: {env_value!r}")
                continue
            setattr(config, field_name, value)

        config.__post_init__()
        return config

    @classmethod
    def from_file(cls, path: str) -> "CrawlerConfig":
        """Load configuration from a JSON file.

        The file may hold the settings at top level or under a "crawler" key.
        A missing file yields the defaults.

        Args:
            path: Path to JSON configuration file

        Returns:
            CrawlerConfig with values from file
        """
        file_path = Path(path)
        if not file_path.exists():
            return cls()

        with open(file_path, 'r') as f:
            data = json.load(f)

        section = data.get('crawler', data)
        known = {
            name: section[name]
            for name in cls.__dataclass_fields__
            if name in section
        }
        return cls(**known)

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary."""
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }
