"""
Exceptions raised by the scraping toolkit.
"""

from __future__ import annotations


class ScrapeKitError(Exception):
    """Base exception for scraping toolkit failures."""


class ConfigError(ScrapeKitError):
    """Raised when scraper options cannot be turned into a valid config."""


class FetchError(ScrapeKitError):
    """Raised when a page cannot be fetched or returns no content."""


class DownloadError(ScrapeKitError):
    """Raised when a file download fails; partial files are removed first."""


class FormatterError(ScrapeKitError):
    """Raised when a formatter cannot be resolved from a dotted path."""


class UnknownFormatterError(FormatterError):
    """Raised when the configured output format has no registered formatter."""
