"""
Shared formatter contract and file-writing helpers.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol


class DataFormatter(Protocol):
    """
    Serializes records to `filepath` and returns the saved path, or `None`
    when nothing was written.
    """

    def __call__(
        self,
        filepath: str | Path,
        records: Sequence[Mapping[str, Any]],
    ) -> str | None:
        ...


def with_default_extension(filepath: str | Path, extension: str) -> Path:
    path = Path(filepath)
    if path.suffix:
        return path
    return path.with_name(f"{path.name}{extension}")


def write_text_atomic(path: Path, content: str, *, newline: str | None = None) -> None:
    """
    Write `content` to a hidden sibling file and move it over `path` once complete.
    The file is created with the process umask, like a plain `open`.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline=newline) as handle:
            handle.write(content)
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
