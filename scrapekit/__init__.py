"""
Configurable web-scraping toolkit.
"""

from scrapekit.config import BrowserOptions, ScraperConfig, build_config
from scrapekit.engine import CrawlCallbacks, CrawlOrchestrator, UrlQueue
from scrapekit.errors import (
    ConfigError,
    DownloadError,
    FetchError,
    FormatterError,
    ScrapeKitError,
    UnknownFormatterError,
)
from scrapekit.scraper import Scraper, create_scraper
from scrapekit.types import ExtractKind, ExtractResult, SeedScrapeSummary, SeedUrl

__all__ = [
    "BrowserOptions",
    "ConfigError",
    "CrawlCallbacks",
    "CrawlOrchestrator",
    "DownloadError",
    "ExtractKind",
    "ExtractResult",
    "FetchError",
    "FormatterError",
    "ScrapeKitError",
    "Scraper",
    "ScraperConfig",
    "SeedScrapeSummary",
    "SeedUrl",
    "UnknownFormatterError",
    "UrlQueue",
    "build_config",
    "create_scraper",
]
