"""
Direct HTTP fetch strategy.
"""

from __future__ import annotations

import requests

from scrapekit.errors import FetchError
from scrapekit.fetchers.base import HTML_ACCEPT_HEADER, PageFetcher


class RequestsPageFetcher(PageFetcher):
    """
    Issues one GET per page with a browser-like user agent.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._timeout_seconds = timeout_seconds
        self.request_headers = {
            "User-Agent": user_agent,
            "Accept": HTML_ACCEPT_HEADER,
        }

    def fetch_html(self, url: str) -> str:
        try:
            response = self._session.get(
                url,
                headers=self.request_headers,
                timeout=self._timeout_seconds,
                allow_redirects=True,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc

        if not response.text:
            raise FetchError(f"Empty response body for {url}")
        return response.text

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
