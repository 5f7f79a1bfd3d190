"""
Fixed-window request throttle.
"""

from __future__ import annotations

import time
from collections.abc import Callable


class BatchThrottle:
    """
    Sleeps between requests, with a longer pause once a batch of fetches
    has completed.

    The fetched-page counter belongs to one throttle instance, so separate
    scrapers never share pacing state.
    """

    def __init__(
        self,
        *,
        request_interval_ms: int,
        batch_size: int,
        batch_interval_ms: int,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._request_interval = max(0, request_interval_ms) / 1000.0
        self._batch_interval = max(0, batch_interval_ms) / 1000.0
        self._batch_size = max(1, batch_size)
        self._sleep = sleep
        self._fetched_pages = 0

    @property
    def fetched_pages(self) -> int:
        return self._fetched_pages

    def record_fetch(self) -> None:
        self._fetched_pages += 1

    def wait(self) -> float:
        """
        Sleep for the next interval and return the number of seconds slept.
        """

        if self._fetched_pages >= self._batch_size:
            self._fetched_pages = 0
            seconds = self._batch_interval
        else:
            seconds = self._request_interval

        if seconds > 0:
            self._sleep(seconds)
        return seconds
