"""
CSV output formatter.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from scrapekit.formatters.base import with_default_extension, write_text_atomic
from scrapekit.logging_utils import log_event

logger = logging.getLogger(__name__)


def collect_fieldnames(records: Sequence[Mapping[str, Any]]) -> list[str]:
    """
    Ordered union of keys across records, in order of first appearance.
    """

    fieldnames: dict[str, None] = {}
    for record in records:
        for key in record:
            fieldnames.setdefault(str(key), None)
    return list(fieldnames)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def csv_formatter(filepath: str | Path, records: Sequence[Mapping[str, Any]]) -> str | None:
    if not records:
        log_event(logger, logging.INFO, "no_file_saved", reason="data is empty")
        return None

    path = with_default_extension(filepath, ".csv")
    fieldnames = collect_fieldnames(records)
    try:
        buf = io.StringIO()
        writer = csv.DictWriter(
            buf,
            fieldnames=fieldnames,
            restval="",
            lineterminator="\n",
        )
        writer.writeheader()
        for record in records:
            writer.writerow({str(key): _cell(value) for key, value in record.items()})
        write_text_atomic(path, buf.getvalue(), newline="")
    except (OSError, csv.Error, TypeError, ValueError) as exc:
        log_event(logger, logging.ERROR, "csv_write_failed", path=path, error=str(exc))
        return None

    return str(path)
