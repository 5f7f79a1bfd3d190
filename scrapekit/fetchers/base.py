"""
Page fetch abstraction and the loader that parses fetched HTML.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from scrapekit.errors import FetchError
from scrapekit.logging_utils import log_event
from scrapekit.rate_limiter import BatchThrottle

logger = logging.getLogger(__name__)

HTML_ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class PageFetcher(ABC):
    """
    Strategy returning raw HTML for a URL.
    """

    @abstractmethod
    def fetch_html(self, url: str) -> str:
        """
        Return page HTML or raise `FetchError`.
        """

    def close(self) -> None:
        """
        Release resources held across fetches.
        """


class PageLoader:
    """
    Fetches a page through a strategy and parses it into a queryable document.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcher,
        throttle: BatchThrottle,
        parser: str = "html.parser",
    ) -> None:
        self.fetcher = fetcher
        self.throttle = throttle
        self._parser = parser

    def load(self, url: str) -> BeautifulSoup | None:
        """
        Return the parsed page, or `None` when it cannot be fetched or parsed.
        """

        try:
            html = self.fetcher.fetch_html(url)
            if not html:
                raise FetchError("Failed to fetch data")
            page = BeautifulSoup(html, self._parser)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "page_fetch_failed",
                url=url,
                error=str(exc),
            )
            return None

        self.throttle.record_fetch()
        return page

    def close(self) -> None:
        self.fetcher.close()
