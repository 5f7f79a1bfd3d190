"""
Output formatters.
"""

from scrapekit.formatters.base import DataFormatter
from scrapekit.formatters.csv_formatter import csv_formatter
from scrapekit.formatters.json_formatter import json_formatter
from scrapekit.formatters.registry import FormatterRegistry, load_callable

__all__ = [
    "DataFormatter",
    "FormatterRegistry",
    "csv_formatter",
    "json_formatter",
    "load_callable",
]
