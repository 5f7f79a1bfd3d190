from __future__ import annotations

import sys
import types

import pytest
import requests
from conftest import FakeFetcher, FakeResponse, FakeSession

from scrapekit.config import BrowserOptions, build_config
from scrapekit.errors import FetchError
from scrapekit.fetchers import (
    BrowserPageFetcher,
    PageLoader,
    RequestsPageFetcher,
    create_fetcher,
)
from scrapekit.rate_limiter import BatchThrottle

URL = "https://shop.test/list"


def _throttle() -> BatchThrottle:
    return BatchThrottle(request_interval_ms=0, batch_size=10, batch_interval_ms=0)


def test_requests_fetcher_sends_html_headers() -> None:
    session = FakeSession({URL: FakeResponse(text="<h1>ok</h1>")})
    fetcher = RequestsPageFetcher(user_agent="TestAgent/1.0", timeout_seconds=3, session=session)

    assert fetcher.fetch_html(URL) == "<h1>ok</h1>"
    _, kwargs = session.calls[0]
    assert kwargs["headers"]["User-Agent"] == "TestAgent/1.0"
    assert kwargs["headers"]["Accept"].startswith("text/html")
    assert kwargs["timeout"] == 3


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=503, text="busy"),
        FakeResponse(status_code=200, text=""),
        requests.Timeout("timed out"),
    ],
)
def test_requests_fetcher_raises_fetch_error(response) -> None:
    fetcher = RequestsPageFetcher(user_agent="TestAgent/1.0", session=FakeSession({URL: response}))

    with pytest.raises(FetchError):
        fetcher.fetch_html(URL)


def test_page_loader_parses_and_counts_successful_fetches() -> None:
    throttle = _throttle()
    loader = PageLoader(
        fetcher=FakeFetcher({URL: "<html><h1>Shoes</h1></html>"}),
        throttle=throttle,
    )

    page = loader.load(URL)

    assert page.select_one("h1").get_text() == "Shoes"
    assert throttle.fetched_pages == 1


def test_page_loader_returns_none_on_failure_without_counting() -> None:
    throttle = _throttle()
    loader = PageLoader(fetcher=FakeFetcher({}, failing=[URL]), throttle=throttle)

    assert loader.load(URL) is None
    assert throttle.fetched_pages == 0


class _FakePage:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def goto(self, url: str, wait_until: str) -> None:
        self.log.append(f"goto {url} {wait_until}")

    def wait_for_selector(self, selector: str) -> None:
        self.log.append(f"wait {selector}")

    def content(self) -> str:
        return "<html>rendered</html>"

    def close(self) -> None:
        self.log.append("page closed")


class _FakeBrowser:
    def __init__(self) -> None:
        self.log: list[str] = []
        self.pages = 0
        self.closed = 0

    def new_page(self, user_agent: str | None = None) -> _FakePage:
        self.pages += 1
        self.log.append(f"new_page {user_agent}")
        return _FakePage(self.log)

    def close(self) -> None:
        self.closed += 1


class _FakeChromium:
    def __init__(self, browser: _FakeBrowser) -> None:
        self.browser = browser
        self.launches: list[dict] = []

    def launch(self, **kwargs) -> _FakeBrowser:
        self.launches.append(kwargs)
        return self.browser


class _FakePlaywright:
    def __init__(self, browser: _FakeBrowser) -> None:
        self.chromium = _FakeChromium(browser)
        self.stopped = 0
        self.starts = 0

    def stop(self) -> None:
        self.stopped += 1


@pytest.fixture()
def fake_playwright(monkeypatch) -> _FakePlaywright:
    playwright = _FakePlaywright(_FakeBrowser())

    class _Manager:
        def start(self) -> _FakePlaywright:
            playwright.starts += 1
            return playwright

    sync_api = types.ModuleType("playwright.sync_api")
    sync_api.sync_playwright = _Manager
    package = types.ModuleType("playwright")
    package.sync_api = sync_api
    monkeypatch.setitem(sys.modules, "playwright", package)
    monkeypatch.setitem(sys.modules, "playwright.sync_api", sync_api)
    return playwright


def test_browser_fetcher_launches_once_and_waits_for_selector(fake_playwright) -> None:
    options = BrowserOptions(
        headless=False,
        args=("--no-sandbox",),
        wait_for_selector=".product",
        launch_options={"slow_mo": 50},
    )
    fetcher = BrowserPageFetcher(options=options, user_agent="TestAgent/1.0")

    assert fetcher.fetch_html(URL) == "<html>rendered</html>"
    assert fetcher.fetch_html(URL) == "<html>rendered</html>"

    browser = fake_playwright.chromium.browser
    assert fake_playwright.starts == 1
    assert fake_playwright.chromium.launches == [
        {"headless": False, "args": ["--no-sandbox"], "slow_mo": 50}
    ]
    assert browser.pages == 2
    assert browser.log[:4] == [
        "new_page TestAgent/1.0",
        f"goto {URL} load",
        "wait .product",
        "page closed",
    ]


def test_browser_fetcher_close_tears_down_browser_and_playwright(fake_playwright) -> None:
    fetcher = BrowserPageFetcher(options=BrowserOptions())
    fetcher.fetch_html(URL)

    fetcher.close()
    fetcher.close()

    assert fake_playwright.chromium.browser.closed == 1
    assert fake_playwright.stopped == 1
    assert fetcher._browser is None
    assert fetcher._playwright is None


def test_browser_fetcher_without_playwright_raises_fetch_error(monkeypatch) -> None:
    monkeypatch.setitem(sys.modules, "playwright", None)
    monkeypatch.setitem(sys.modules, "playwright.sync_api", None)
    fetcher = BrowserPageFetcher(options=BrowserOptions())

    with pytest.raises(FetchError, match="requires Playwright"):
        fetcher.fetch_html(URL)


def test_create_fetcher_selects_strategy() -> None:
    plain = build_config(use_env=False)
    rendered = build_config({"use_browser": True}, use_env=False)

    assert isinstance(create_fetcher(plain), RequestsPageFetcher)
    assert isinstance(create_fetcher(rendered), BrowserPageFetcher)
