"""
Page fetch strategies.
"""

from __future__ import annotations

import requests

from scrapekit.config.models import ScraperConfig
from scrapekit.fetchers.base import PageFetcher, PageLoader
from scrapekit.fetchers.browser_fetcher import BrowserPageFetcher
from scrapekit.fetchers.http_fetcher import RequestsPageFetcher

__all__ = [
    "BrowserPageFetcher",
    "PageFetcher",
    "PageLoader",
    "RequestsPageFetcher",
    "create_fetcher",
]


def create_fetcher(config: ScraperConfig, *, session: requests.Session | None = None) -> PageFetcher:
    """
    Pick the fetch strategy selected by `config.use_browser`.
    """

    if config.use_browser:
        return BrowserPageFetcher(options=config.browser, user_agent=config.user_agent)
    return RequestsPageFetcher(
        user_agent=config.user_agent,
        timeout_seconds=config.timeout_seconds,
        session=session,
    )
