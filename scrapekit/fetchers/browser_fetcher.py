"""
Headless browser fetch strategy backed by Playwright.
"""

from __future__ import annotations

import logging
from typing import Any

from scrapekit.config.models import BrowserOptions
from scrapekit.errors import FetchError
from scrapekit.fetchers.base import PageFetcher
from scrapekit.logging_utils import log_event

logger = logging.getLogger(__name__)


class BrowserPageFetcher(PageFetcher):
    """
    Renders pages in one lazily started Chromium instance.

    The browser is reused for every fetch until `close()` is called.
    """

    def __init__(self, *, options: BrowserOptions, user_agent: str | None = None) -> None:
        self._options = options
        self._user_agent = user_agent
        self._playwright: Any = None
        self._browser: Any = None

    def fetch_html(self, url: str) -> str:
        browser = self._get_browser()
        page = browser.new_page(user_agent=self._user_agent)
        try:
            page.goto(url, wait_until="load")
            if self._options.wait_for_selector:
                page.wait_for_selector(self._options.wait_for_selector)
            return page.content()
        except Exception as exc:
            raise FetchError(f"Failed to render {url}: {exc}") from exc
        finally:
            page.close()

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
            log_event(logger, logging.INFO, "browser_closed")

    def _get_browser(self) -> Any:
        if self._browser is not None:
            return self._browser

        try:
            from playwright.sync_api import sync_playwright
        except ImportError as exc:
            raise FetchError(
                "Browser fetching requires Playwright. Install with `pip install scrapekit[browser]`."
            ) from exc

        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self._options.headless,
            args=list(self._options.args),
            **self._options.launch_options,
        )
        log_event(logger, logging.INFO, "browser_started", headless=self._options.headless)
        return self._browser
