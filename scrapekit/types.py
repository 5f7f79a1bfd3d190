"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Record = dict[str, Any]


@dataclass(frozen=True)
class SeedUrl:
    """
    One top-level URL to crawl plus static fields merged into its records.
    """

    url: str
    static: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: object) -> "SeedUrl":
        """
        Accept a bare URL, a `(url, static)` pair or a
        `{"url": ..., "static": {...}}` mapping.
        """

        if isinstance(entry, SeedUrl):
            return entry
        if isinstance(entry, str):
            return cls(url=entry.strip())
        if isinstance(entry, Mapping):
            static = entry.get("static")
            return cls(
                url=str(entry.get("url") or "").strip(),
                static=dict(static) if isinstance(static, Mapping) else {},
            )
        if isinstance(entry, Sequence) and len(entry) == 2:
            url, static = entry
            return cls(
                url=str(url or "").strip(),
                static=dict(static) if isinstance(static, Mapping) else {},
            )
        raise ValueError(f"Unsupported seed entry: {entry!r}")


class ExtractKind(str, Enum):
    EMPTY = "empty"
    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class ExtractResult:
    """
    What the item extractor produced for one page.
    """

    kind: ExtractKind
    records: tuple[Mapping[str, Any], ...] = ()

    @classmethod
    def empty(cls) -> "ExtractResult":
        return cls(kind=ExtractKind.EMPTY)

    @classmethod
    def one(cls, record: Mapping[str, Any]) -> "ExtractResult":
        return cls(kind=ExtractKind.ONE, records=(record,))

    @classmethod
    def many(cls, records: Sequence[Mapping[str, Any]]) -> "ExtractResult":
        if not records:
            return cls.empty()
        return cls(kind=ExtractKind.MANY, records=tuple(records))

    @classmethod
    def from_value(cls, value: object) -> "ExtractResult":
        """
        Normalize an extractor return value: `None`, a mapping, a sequence
        of mappings or an `ExtractResult`.
        """

        if value is None:
            return cls.empty()
        if isinstance(value, ExtractResult):
            return value
        if isinstance(value, Mapping):
            return cls.one(value)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            records = [item for item in value if item is not None]
            for item in records:
                if not isinstance(item, Mapping):
                    raise TypeError(
                        f"Extractor returned a sequence containing {type(item).__name__}; "
                        "expected mappings."
                    )
            return cls.many(records)
        raise TypeError(
            f"Extractor returned {type(value).__name__}; expected a mapping, "
            "a sequence of mappings or None."
        )


def merge_record(
    record: Mapping[str, Any],
    static: Mapping[str, Any],
    extra: object = None,
) -> Record:
    """
    Shallow-merge one extracted record with seed static data and per-URL
    supplemental data. Later sources win: extracted, static, supplemental.
    """

    merged: Record = {**record, **static}
    if isinstance(extra, Mapping):
        merged.update(extra)
    return merged


@dataclass(frozen=True)
class SeedScrapeSummary:
    """
    Outcome for one seed URL.
    """

    url: str
    records_scraped: int
    saved_path: str | None
    status: str
    errors: list[str] = field(default_factory=list)
