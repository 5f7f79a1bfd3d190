"""
Builder-style scraper facade.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

import requests
from bs4 import BeautifulSoup

from scrapekit.config import build_config
from scrapekit.downloader import FileDownloader
from scrapekit.engine import (
    CrawlCallbacks,
    CrawlOrchestrator,
    FilenameFormatter,
    ItemDataExtractor,
    LinkFinder,
)
from scrapekit.errors import UnknownFormatterError
from scrapekit.fetchers import PageFetcher, PageLoader, create_fetcher
from scrapekit.formatters import DataFormatter, FormatterRegistry
from scrapekit.logging_utils import log_event
from scrapekit.rate_limiter import BatchThrottle
from scrapekit.types import Record, SeedScrapeSummary, SeedUrl
from scrapekit.urls import default_filename, is_valid_url

logger = logging.getLogger(__name__)


def _require_callable(callback: object, role: str) -> None:
    if not callable(callback):
        raise TypeError(f"{role} must be callable, got {type(callback).__name__}.")


class Scraper:
    """
    Holds configuration, callbacks and formatters, and runs one crawl per
    seed URL followed by one formatter write per seed.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        session: requests.Session | None = None,
        fetcher: PageFetcher | None = None,
        sleep: Callable[[float], None] = time.sleep,
        use_env: bool = True,
    ) -> None:
        self.config = build_config(options, use_env=use_env)
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._callbacks = CrawlCallbacks()
        self._formatters = FormatterRegistry()
        self._throttle = BatchThrottle(
            request_interval_ms=self.config.request_interval,
            batch_size=self.config.batch_size,
            batch_interval_ms=self.config.batch_interval,
            sleep=sleep,
        )
        self._loader = PageLoader(
            fetcher=fetcher or create_fetcher(self.config, session=self._session),
            throttle=self._throttle,
        )
        self._downloader = FileDownloader(config=self.config, session=self._session)
        self._orchestrator = CrawlOrchestrator(
            loader=self._loader,
            downloader=self._downloader,
            callbacks=self._callbacks,
        )

    def find_pagination_links(self, callback: LinkFinder) -> "Scraper":
        _require_callable(callback, "Pagination links finder")
        self._callbacks.pagination_links_finder = callback
        return self

    def find_items_links(self, callback: LinkFinder) -> "Scraper":
        _require_callable(callback, "Items links finder")
        self._callbacks.items_links_finder = callback
        return self

    def extract_item_data(self, callback: ItemDataExtractor) -> "Scraper":
        _require_callable(callback, "Item data extractor")
        self._callbacks.item_data_extractor = callback
        return self

    def customize_filename(self, callback: FilenameFormatter) -> "Scraper":
        _require_callable(callback, "Filename formatter")
        self._callbacks.filename_formatter = callback
        return self

    def register_formatter(self, name: str, callback: DataFormatter) -> "Scraper":
        self._formatters.register(name=name, formatter=callback)
        return self

    def get_data_formatter(self) -> DataFormatter:
        return self._formatters.get(self.config.format)

    def fetch_page(self, url: str) -> BeautifulSoup | None:
        return self._loader.load(url)

    def download_file(self, url: str | None, filename: str | None = None) -> str | None:
        return self._downloader.download(url, filename)

    def scrape_url(
        self,
        url: str,
        static_data: Mapping[str, Any] | None = None,
    ) -> list[Record] | None:
        return self._orchestrator.crawl_seed(url, static_data)

    def scrape(self, urls: Iterable[object] = ()) -> list[SeedScrapeSummary]:
        """
        Crawl every seed and write its records with the configured formatter.

        Seeds are plain URLs, `(url, static)` pairs or
        `{"url": ..., "static": {...}}` mappings.
        """

        self.config.files_path.mkdir(parents=True, exist_ok=True)

        try:
            formatter = self.get_data_formatter()
        except UnknownFormatterError as exc:
            log_event(
                logger,
                logging.ERROR,
                "scrape_aborted",
                format=self.config.format,
                error=str(exc),
            )
            return []

        summaries: list[SeedScrapeSummary] = []
        try:
            for entry in urls:
                try:
                    seed = SeedUrl.from_entry(entry)
                except ValueError as exc:
                    log_event(logger, logging.WARNING, "seed_skipped", error=str(exc))
                    continue
                if not is_valid_url(seed.url):
                    log_event(logger, logging.WARNING, "seed_skipped", url=seed.url, error="invalid URL")
                    continue
                summaries.append(self._scrape_seed(seed, formatter))
        finally:
            self.close()

        return summaries

    def close(self) -> None:
        self._loader.close()
        if self._owns_session:
            self._session.close()

    def _scrape_seed(self, seed: SeedUrl, formatter: DataFormatter) -> SeedScrapeSummary:
        try:
            records = self.scrape_url(seed.url, seed.static)
        except Exception as exc:
            log_event(logger, logging.ERROR, "seed_scrape_failed", url=seed.url, error=str(exc))
            return SeedScrapeSummary(
                url=seed.url,
                records_scraped=0,
                saved_path=None,
                status="failed",
                errors=[str(exc)],
            )

        if records is None:
            return SeedScrapeSummary(
                url=seed.url,
                records_scraped=0,
                saved_path=None,
                status="failed",
                errors=[f"Cannot fetch page {seed.url}"],
            )

        try:
            filename = self._callbacks.filename_formatter(default_filename(seed.url), seed.url, records)
            filepath = self.config.data_path / filename
            saved_path = formatter(filepath, records)
        except Exception as exc:
            log_event(logger, logging.ERROR, "formatter_failed", url=seed.url, error=str(exc))
            return SeedScrapeSummary(
                url=seed.url,
                records_scraped=len(records),
                saved_path=None,
                status="failed",
                errors=[str(exc)],
            )

        if saved_path:
            log_event(logger, logging.INFO, "seed_saved", url=seed.url, file=Path(saved_path).name)
            status = "saved"
            errors: list[str] = []
        elif not records:
            status = "empty"
            errors = []
        else:
            status = "failed"
            errors = [f"Formatter '{self.config.format}' did not save output"]

        return SeedScrapeSummary(
            url=seed.url,
            records_scraped=len(records),
            saved_path=str(saved_path) if saved_path else None,
            status=status,
            errors=errors,
        )


def create_scraper(options: Mapping[str, Any] | None = None, **kwargs: Any) -> Scraper:
    """
    Build a scraper from option overrides.
    """

    return Scraper(options, **kwargs)
