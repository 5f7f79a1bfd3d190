"""
Scraper configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class BrowserOptions:
    """
    Headless browser settings used by the browser fetch strategy.
    """

    headless: bool = True
    args: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")
    wait_for_selector: str | None = None
    launch_options: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ScraperConfig:
    """
    Runtime settings for one scraper instance.

    Intervals are expressed in milliseconds.
    """

    format: str
    user_agent: str
    request_interval: int
    batch_size: int
    batch_interval: int
    data_directory: str
    files_directory: str
    use_browser: bool = False
    browser: BrowserOptions = field(default_factory=BrowserOptions)
    timeout_seconds: float = 15.0

    @property
    def data_path(self) -> Path:
        return (Path.cwd() / self.data_directory).resolve()

    @property
    def files_path(self) -> Path:
        return (self.data_path / self.files_directory).resolve()
