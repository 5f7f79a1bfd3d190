from __future__ import annotations

from collections.abc import Iterable

import pytest
import requests

from scrapekit.errors import FetchError
from scrapekit.fetchers import PageFetcher
from scrapekit.scraper import Scraper

SEED_URL = "https://shop.test/list"


class FakeFetcher(PageFetcher):
    """In-memory page source recording every fetch."""

    def __init__(self, pages: dict[str, str], failing: Iterable[str] = ()) -> None:
        self.pages = dict(pages)
        self.failing = set(failing)
        self.calls: list[str] = []
        self.closed = 0

    def fetch_html(self, url: str) -> str:
        self.calls.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(f"HTTP error! Status: 404 for {url}")
        return self.pages[url]

    def close(self) -> None:
        self.closed += 1


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        text: str = "",
        chunks: Iterable[bytes] = (),
        headers: dict[str, str] | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self._chunks = list(chunks)
        self._fail_after = fail_after
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def iter_content(self, chunk_size: int = 1):
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise requests.ConnectionError("connection reset during stream")
            yield chunk

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FakeSession:
    def __init__(self, responses: dict[str, object]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, dict]] = []
        self.closed = 0

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed += 1


def listing_html(*, items: Iterable[str] = (), pages: Iterable[str] = (), title: str = "Listing") -> str:
    item_links = "".join(f'<a class="item" href="{href}">item</a>' for href in items)
    page_links = "".join(f'<a class="page" href="{href}">page</a>' for href in pages)
    return f"<html><body><h1>{title}</h1>{item_links}{page_links}</body></html>"


def item_html(title: str, **fields: str) -> str:
    extra = "".join(f'<span class="{key}">{value}</span>' for key, value in fields.items())
    return f"<html><body><h1>{title}</h1>{extra}</body></html>"


def select_items(page, url):
    return [link["href"] for link in page.select("a.item")]


def select_pages(page, url):
    return [link["href"] for link in page.select("a.page")]


def extract_title(page, download, url, enqueue, extra=None):
    return {"title": page.select_one("h1").get_text(), "url": url}


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def make_scraper(tmp_path, sleeps):
    def _make(pages: dict[str, str], failing: Iterable[str] = (), **options):
        fetcher = FakeFetcher(pages, failing)
        merged = {
            "data_directory": str(tmp_path),
            "request_interval": 10,
            "batch_interval": 50,
            "batch_size": 30,
            **options,
        }
        scraper = Scraper(merged, fetcher=fetcher, sleep=sleeps.append, use_env=False)
        return scraper, fetcher

    return _make
