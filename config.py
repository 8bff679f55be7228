"""Configuration management for vidbrowse."""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_VALID_SORTS = ("latest", "oldest", "title", "channel")
_VALID_SEARCH_TYPES = ("live", "stored")

DEFAULT_POPULAR_SEARCHES = [
    "talkfootballhd", "how to make tea", "cooking recipes", "tech reviews",
    "gaming highlights", "travel vlogs", "music videos", "movie trailers",
    "programming tutorials", "fitness workouts", "comedy sketches", "science experiments",
]


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings, dicts, and lists.

    Supports both ${VAR} and $VAR patterns.
    """
    if isinstance(value, str):
        pattern = re.compile(r'\$\{([^}]+)\}')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), value)
        pattern = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
        result = pattern.sub(lambda m: os.environ.get(m.group(1), ''), result)
        return result
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class APIConfig:
    """Video API collaborator configuration."""
    base_url: str = "http://localhost:8080"
    timeout: float = 10.0  # seconds, listing + health
    search_timeout: float = 20.0  # seconds, stored + live search
    retries: int = 2  # connection retries handed to the httpx transport


@dataclass
class BrowserConfig:
    """Query/cache/pagination behaviour."""
    page_size: int = 12
    stale_after_seconds: float = 120.0
    cache_max_entries: int = 200
    window_size: int = 5
    default_sort: str = "latest"
    default_search_type: str = "live"
    popular_searches: list[str] = field(default_factory=lambda: list(DEFAULT_POPULAR_SEARCHES))


@dataclass
class WebConfig:
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class DatabaseConfig:
    """Database configuration."""
    path: str = "db/vidbrowse.db"


@dataclass
class Config:
    """Main configuration container."""
    api: APIConfig = field(default_factory=APIConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    web: WebConfig = field(default_factory=WebConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from YAML file with environment variable expansion."""
        path = Path(path)
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f) or {}

        expanded_config = expand_env_vars(raw_config)

        api_data = expanded_config.get("api") or {}
        browser_data = expanded_config.get("browser") or {}
        web_data = expanded_config.get("web") or {}
        database_data = expanded_config.get("database") or {}

        return cls(
            api=APIConfig(**api_data),
            browser=BrowserConfig(**browser_data),
            web=WebConfig(**web_data),
            database=DatabaseConfig(**database_data),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration directly from environment variables."""
        popular = os.environ.get("VB_POPULAR_SEARCHES", "")
        return cls(
            api=APIConfig(
                base_url=os.environ.get("VB_API_BASE_URL", "http://localhost:8080"),
                timeout=float(os.environ.get("VB_API_TIMEOUT", "10")),
                search_timeout=float(os.environ.get("VB_API_SEARCH_TIMEOUT", "20")),
                retries=int(os.environ.get("VB_API_RETRIES", "2")),
            ),
            browser=BrowserConfig(
                page_size=int(os.environ.get("VB_PAGE_SIZE", "12")),
                stale_after_seconds=float(os.environ.get("VB_STALE_AFTER_SECONDS", "120")),
                cache_max_entries=int(os.environ.get("VB_CACHE_MAX_ENTRIES", "200")),
                window_size=int(os.environ.get("VB_WINDOW_SIZE", "5")),
                default_sort=os.environ.get("VB_DEFAULT_SORT", "latest"),
                default_search_type=os.environ.get("VB_DEFAULT_SEARCH_TYPE", "live"),
                popular_searches=(
                    [t.strip() for t in popular.split(",") if t.strip()]
                    if popular else list(DEFAULT_POPULAR_SEARCHES)
                ),
            ),
            web=WebConfig(
                host=os.environ.get("VB_WEB_HOST", "0.0.0.0"),
                port=int(os.environ.get("VB_WEB_PORT", "8000")),
            ),
            database=DatabaseConfig(
                path=os.environ.get("VB_DB_PATH", "db/vidbrowse.db"),
            ),
        )


def _validate(config: Config) -> None:
    """Warn about and repair values the browser can't work with."""
    if not config.api.base_url:
        logger.warning("api.base_url is empty, every fetch will fail")

    b = config.browser
    defaults = BrowserConfig()
    if b.default_sort not in _VALID_SORTS:
        logger.warning("Invalid browser.default_sort %r, falling back to %r", b.default_sort, defaults.default_sort)
        b.default_sort = defaults.default_sort
    if b.default_search_type not in _VALID_SEARCH_TYPES:
        logger.warning("Invalid browser.default_search_type %r, falling back to %r",
                       b.default_search_type, defaults.default_search_type)
        b.default_search_type = defaults.default_search_type
    for name in ("page_size", "window_size", "cache_max_entries"):
        if getattr(b, name) < 1:
            logger.warning("browser.%s must be positive, falling back to %d", name, getattr(defaults, name))
            setattr(b, name, getattr(defaults, name))


def load_config(config_path: str | None = None) -> Config:
    """Load configuration from file or environment.

    Tries in order:
    1. Provided config_path
    2. Default paths: config.yaml, config.yml
    3. Environment variables (fallback)
    """
    config: Config | None = None

    if config_path:
        path = Path(config_path)
        if path.exists():
            config = Config.from_yaml(path)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in ["config.yaml", "config.yml"]:
            path = Path(default_path)
            if path.exists():
                config = Config.from_yaml(path)
                break

    if config is None:
        config = Config.from_env()

    _validate(config)
    return config
