"""
Scraper configuration.

All knobs come from environment variables (``.env`` is loaded by main.py).
"""

import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_LEARNING_PATH = "data/scraper-learning.json"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"[config] {name}={raw!r} is not a number, using {default}")
        return default
    if value <= 0:
        logger.warning(f"[config] {name}={raw!r} must be positive, using {default}")
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"[config] {name}={raw!r} is not an integer, using {default}")
        return default
    if value < 0:
        logger.warning(f"[config] {name}={raw!r} must not be negative, using {default}")
        return default
    return value


class ScraperConfig:
    """Timeouts, limits and storage location for the scraper."""

    def __init__(self):
        self.learning_path = Path(os.getenv('SCRAPER_LEARNING_PATH', DEFAULT_LEARNING_PATH))
        self.scrape_timeout = _env_float('SCRAPER_TIMEOUT_SECONDS', 15.0)
        self.fetch_timeout = _env_float('SCRAPER_FETCH_TIMEOUT_SECONDS', 10.0)
        self.max_redirects = _env_int('SCRAPER_MAX_REDIRECTS', 3)
        self.max_page_kb = _env_int('SCRAPER_MAX_PAGE_KB', 2048)
        self.internal_api_key = os.getenv('INTERNAL_API_KEY', '')

        logger.info(
            f"ScraperConfig: learning={self.learning_path}, "
            f"timeout={self.scrape_timeout}s, fetch_timeout={self.fetch_timeout}s, "
            f"redirects={self.max_redirects}, max_page={self.max_page_kb}KB"
        )


# Singleton instance
_scraper_config: Optional[ScraperConfig] = None


def get_scraper_config() -> ScraperConfig:
    """Get singleton scraper config instance."""
    global _scraper_config
    if _scraper_config is None:
        _scraper_config = ScraperConfig()
    return _scraper_config


def reset_scraper_config() -> None:
    """Drop the cached config so the next call re-reads the environment."""
    global _scraper_config
    _scraper_config = None
