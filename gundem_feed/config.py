"""Configuration for gundem_feed.

Settings are read from environment variables. Numeric values that fail to
parse fall back to their defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_FEED_URL = "https://karasugundem.com/feed"
DEFAULT_SITE_URL = "https://karasuemlak.com"
DEFAULT_USER_AGENT = "Karasu Emlak RSS Parser/1.0"


@dataclass
class ServerConfig:
    """Runtime configuration for the server, CLI and pipeline."""

    name: str = "gundem_feed"
    log_level: str = "INFO"
    feed_url: str = DEFAULT_FEED_URL
    site_url: str = DEFAULT_SITE_URL
    source_domain: str = "karasugundem.com"
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout: float = 30.0
    cache_ttl: int = 3600
    og_image_budget: int = 5
    import_limit: int = 20
    import_delay: float = 0.5


@dataclass(frozen=True)
class FetchPolicy:
    """How remote feeds and article pages are requested and cached."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    cache_ttl: int = 3600

    @classmethod
    def from_config(cls, config: ServerConfig) -> "FetchPolicy":
        return cls(
            user_agent=config.user_agent,
            timeout=config.http_timeout,
            cache_ttl=config.cache_ttl,
        )

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Cache-Control": f"max-age={self.cache_ttl}",
        }


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid {name}={raw!r}; falling back to {default}"
        )
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid {name}={raw!r}; falling back to {default}"
        )
        return default


def load_config() -> ServerConfig:
    """Build a ServerConfig from the current environment."""
    site_url = (
        os.environ.get("SITE_URL", "").strip()
        or os.environ.get("NEXT_PUBLIC_SITE_URL", "").strip()
        or DEFAULT_SITE_URL
    )

    return ServerConfig(
        name=_env_str("GUNDEM_FEED_NAME", "gundem_feed"),
        log_level=_env_str("GUNDEM_FEED_LOG_LEVEL", "INFO").upper(),
        feed_url=_env_str("KARASU_GUNDEM_RSS_URL", DEFAULT_FEED_URL),
        site_url=site_url.rstrip("/"),
        source_domain=_env_str("GUNDEM_SOURCE_DOMAIN", "karasugundem.com"),
        user_agent=_env_str("GUNDEM_USER_AGENT", DEFAULT_USER_AGENT),
        http_timeout=_env_float("GUNDEM_HTTP_TIMEOUT", 30.0),
        cache_ttl=_env_int("GUNDEM_CACHE_TTL", 3600),
        og_image_budget=_env_int("OG_IMAGE_BUDGET", 5),
        import_limit=_env_int("GUNDEM_IMPORT_LIMIT", 20),
        import_delay=_env_float("GUNDEM_IMPORT_DELAY", 0.5),
    )


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config
