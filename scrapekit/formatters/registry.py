"""
Output formatter registry and dotted-path callable loader.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping

from scrapekit.errors import FormatterError, UnknownFormatterError
from scrapekit.formatters.base import DataFormatter
from scrapekit.formatters.csv_formatter import csv_formatter
from scrapekit.formatters.json_formatter import json_formatter


class FormatterRegistry:
    """
    Formatter registry supporting built-ins and user registrations.
    """

    def __init__(self, registrations: Mapping[str, DataFormatter] | None = None) -> None:
        builtins: dict[str, DataFormatter] = {
            "json": json_formatter,
            "csv": csv_formatter,
        }
        if registrations:
            builtins.update(registrations)
        self._registrations = builtins

    def register(self, *, name: str, formatter: DataFormatter) -> None:
        if not callable(formatter):
            raise TypeError(f"Formatter '{name}' must be callable.")
        self._registrations[name] = formatter

    def names(self) -> list[str]:
        return sorted(self._registrations)

    def get(self, name: str) -> DataFormatter:
        resolved = self._registrations.get(name)
        if resolved is None:
            allowed = ", ".join(self.names())
            raise UnknownFormatterError(
                f"Specified formatter '{name}' not found. Allowed formats: {allowed}."
            )
        return resolved


def load_callable(path: str) -> Callable[..., object]:
    """
    Resolve a `module.path:attribute` reference to a callable.
    """

    if ":" not in path:
        raise FormatterError(f"Invalid callable path '{path}'. Use 'module.path:name'.")

    module_path, attr_name = path.split(":", 1)
    module = importlib.import_module(module_path)
    loaded = getattr(module, attr_name, None)
    if loaded is None:
        raise FormatterError(f"Unable to resolve callable '{path}'.")
    if not callable(loaded):
        raise FormatterError(f"'{path}' is not callable.")
    return loaded
