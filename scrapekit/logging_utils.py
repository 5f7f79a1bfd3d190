"""
Structured logging helpers for crawl workflows.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one crawl event as a single JSON line.

    `event` always comes first; fields set to `None` are left out and
    non-JSON values such as paths are rendered with `str`.
    """

    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    payload.update((key, fields[key]) for key in sorted(fields) if fields[key] is not None)
    logger.log(level, json.dumps(payload, default=str, ensure_ascii=False))


def configure_logging(level: str = "INFO") -> None:
    """
    Route scrapekit log lines to stderr for command-line runs.
    """

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
