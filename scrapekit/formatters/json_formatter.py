"""
JSON output formatter.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from scrapekit.formatters.base import with_default_extension, write_text_atomic
from scrapekit.logging_utils import log_event

logger = logging.getLogger(__name__)


def json_formatter(filepath: str | Path, records: Sequence[Mapping[str, Any]]) -> str | None:
    if not records:
        log_event(logger, logging.INFO, "no_file_saved", reason="data is empty")
        return None

    path = with_default_extension(filepath, ".json")
    try:
        content = json.dumps(list(records), indent=4, ensure_ascii=False)
        write_text_atomic(path, content)
    except (OSError, TypeError, ValueError) as exc:
        log_event(logger, logging.ERROR, "json_write_failed", path=path, error=str(exc))
        return None

    return str(path)
