"""
Crawl orchestration for one seed URL.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup

from scrapekit.downloader import FileDownloader
from scrapekit.fetchers import PageLoader
from scrapekit.logging_utils import log_event
from scrapekit.types import ExtractResult, Record, merge_record
from scrapekit.urls import is_valid_url, resolve_url

logger = logging.getLogger(__name__)

LinkFinder = Callable[[BeautifulSoup, str], Iterable[str] | None]
Enqueue = Callable[..., int]
ItemDataExtractor = Callable[
    [BeautifulSoup, FileDownloader, str, Enqueue, Any],
    Mapping[str, Any] | Sequence[Mapping[str, Any]] | ExtractResult | None,
]
FilenameFormatter = Callable[[str, str, Sequence[Record]], str]


def _no_item_data(page, download, url, enqueue, extra=None):
    return None


def _keep_filename(filename: str, url: str, records: Sequence[Record]) -> str:
    return filename


@dataclass
class CrawlCallbacks:
    """
    User hooks driving link discovery, extraction and output naming.
    """

    pagination_links_finder: LinkFinder | None = None
    items_links_finder: LinkFinder | None = None
    item_data_extractor: ItemDataExtractor = _no_item_data
    filename_formatter: FilenameFormatter = _keep_filename


class UrlQueue:
    """
    FIFO of URLs in which a URL is never pending twice.
    """

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._items: deque[str] = deque()
        self._pending: set[str] = set()
        self.extend(urls)

    def push(self, url: str) -> bool:
        if not url or url in self._pending:
            return False
        self._items.append(url)
        self._pending.add(url)
        return True

    def extend(self, urls: Iterable[str]) -> int:
        return sum(1 for url in urls if self.push(url))

    def pop(self) -> str:
        url = self._items.popleft()
        self._pending.discard(url)
        return url

    def __contains__(self, url: object) -> bool:
        return url in self._pending

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class _CrawlState:
    scraped: set[str] = field(default_factory=set)
    extras: dict[str, Any] = field(default_factory=dict)
    records: list[Record] = field(default_factory=list)


class CrawlOrchestrator:
    """
    Walks pagination pages and item pages of one seed URL and collects
    merged records.
    """

    def __init__(
        self,
        *,
        loader: PageLoader,
        downloader: FileDownloader,
        callbacks: CrawlCallbacks,
    ) -> None:
        self._loader = loader
        self._downloader = downloader
        self._callbacks = callbacks

    def crawl_seed(
        self,
        url: str,
        static_data: Mapping[str, Any] | None = None,
    ) -> list[Record] | None:
        """
        Crawl one seed URL and return its merged records, or `None` when the
        seed page itself cannot be fetched.
        """

        static = dict(static_data or {})
        seed_page = self._loader.load(url)
        if seed_page is None:
            log_event(logger, logging.WARNING, "seed_fetch_failed", url=url)
            return None

        state = _CrawlState()
        queue = UrlQueue([url])
        if self._callbacks.pagination_links_finder is not None:
            pagination_links = self._find_links(
                self._callbacks.pagination_links_finder,
                seed_page,
                url,
            )
            queue.extend(pagination_links)

        while queue:
            page_url = queue.pop()
            if page_url in state.scraped:
                log_event(logger, logging.INFO, "page_already_scraped", url=page_url)
                continue

            log_event(logger, logging.INFO, "page_scrape_started", url=page_url)
            page = seed_page if page_url == url else self._loader.load(page_url)
            state.scraped.add(page_url)

            if page is None:
                log_event(logger, logging.WARNING, "page_skipped", url=page_url)
                continue

            items_finder = self._callbacks.items_links_finder
            if items_finder is not None:
                self._crawl_items(
                    finder=items_finder,
                    page=page,
                    seed_url=url,
                    static=static,
                    state=state,
                )
            else:
                enqueue = self._make_enqueue(queue, state)
                self._extract(
                    page=page,
                    page_url=page_url,
                    enqueue=enqueue,
                    static=static,
                    state=state,
                )

            self._loader.throttle.wait()

        log_event(
            logger,
            logging.INFO,
            "seed_crawl_completed",
            url=url,
            pages_scraped=len(state.scraped),
            records=len(state.records),
        )
        return state.records

    def _crawl_items(
        self,
        *,
        finder: LinkFinder,
        page: BeautifulSoup,
        seed_url: str,
        static: Mapping[str, Any],
        state: _CrawlState,
    ) -> None:
        item_links = self._find_links(finder, page, seed_url)
        items = UrlQueue(item_links)
        enqueue = self._make_enqueue(items, state)

        while items:
            item_url = items.pop()
            if item_url in state.scraped:
                log_event(logger, logging.INFO, "item_already_scraped", url=item_url)
                continue

            log_event(logger, logging.INFO, "item_scrape_started", url=item_url)
            item_page = self._loader.load(item_url)
            state.scraped.add(item_url)

            if item_page is None:
                log_event(logger, logging.WARNING, "item_skipped", url=item_url)
                continue

            self._extract(
                page=item_page,
                page_url=item_url,
                enqueue=enqueue,
                static=static,
                state=state,
            )
            self._loader.throttle.wait()

    def _extract(
        self,
        *,
        page: BeautifulSoup,
        page_url: str,
        enqueue: Enqueue,
        static: Mapping[str, Any],
        state: _CrawlState,
    ) -> None:
        extra = state.extras.pop(page_url, None)
        raw = self._callbacks.item_data_extractor(
            page,
            self._downloader,
            page_url,
            enqueue,
            extra,
        )
        result = ExtractResult.from_value(raw)
        for record in result.records:
            state.records.append(merge_record(record, static, extra))

        log_event(
            logger,
            logging.DEBUG,
            "item_extracted",
            url=page_url,
            kind=result.kind.value,
            records=len(result.records),
        )

    @staticmethod
    def _find_links(finder: LinkFinder, page: BeautifulSoup, seed_url: str) -> list[str]:
        found = finder(page, seed_url) or []
        if isinstance(found, str):
            found = [found]
        return [resolve_url(link, seed_url) for link in found if link]

    @staticmethod
    def _make_enqueue(queue: UrlQueue, state: _CrawlState) -> Enqueue:
        def enqueue(urls: str | Iterable[str] | None, extra: Any = None) -> int:
            """
            Queue more URLs for this crawl; returns how many were accepted.
            """

            if urls is None:
                return 0
            candidates = [urls] if isinstance(urls, str) else list(urls)
            accepted = 0
            for candidate in candidates:
                if not is_valid_url(candidate):
                    log_event(logger, logging.DEBUG, "enqueue_rejected_invalid", url=candidate)
                    continue
                if candidate in state.scraped or candidate in queue:
                    continue
                queue.push(candidate)
                if extra is not None:
                    state.extras[candidate] = extra
                accepted += 1
            return accepted

        return enqueue
