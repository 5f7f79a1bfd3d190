"""
Config helpers for scrapers.
"""

from scrapekit.config.loader import DEFAULT_OPTIONS, build_config, deep_merge, load_env_files
from scrapekit.config.models import BrowserOptions, ScraperConfig

__all__ = [
    "BrowserOptions",
    "DEFAULT_OPTIONS",
    "ScraperConfig",
    "build_config",
    "deep_merge",
    "load_env_files",
]
