"""
Run a configured scrape from the command line.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from scrapekit.errors import ConfigError
from scrapekit.formatters import load_callable
from scrapekit.logging_utils import configure_logging
from scrapekit.scraper import Scraper


def load_seed_file(path: str) -> tuple[list[Any], dict[str, Any]]:
    """
    Read seeds from a JSON file holding either a list of seed entries or
    an object with `urls` and optional `options`.
    """

    raw_data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw_data, list):
        return raw_data, {}
    if not isinstance(raw_data, dict):
        raise ConfigError("Invalid seed file: expected a list or an object.")

    urls = raw_data.get("urls", [])
    options = raw_data.get("options", {})
    if not isinstance(urls, list):
        raise ConfigError("Invalid seed file: 'urls' must be a list.")
    if not isinstance(options, dict):
        raise ConfigError("Invalid seed file: 'options' must be an object.")
    return urls, options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl seed URLs and save extracted items.")
    parser.add_argument("seeds", help="JSON file with seed URLs.")
    parser.add_argument(
        "--extractor",
        required=True,
        help="Item data extractor as 'module.path:function'.",
    )
    parser.add_argument("--pagination", default=None, help="Pagination links finder 'module:function'.")
    parser.add_argument("--items", default=None, help="Items links finder 'module:function'.")
    parser.add_argument("--filename", default=None, help="Filename formatter 'module:function'.")
    parser.add_argument(
        "--formatter",
        action="append",
        default=[],
        metavar="NAME=module:function",
        help="Register an extra output formatter. May be repeated.",
    )
    parser.add_argument("--format", dest="output_format", default=None, help="Output format name.")
    parser.add_argument("--data-directory", default=None, help="Directory for output files.")
    parser.add_argument("--browser", action="store_true", help="Render pages in a headless browser.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    urls, options = load_seed_file(args.seeds)
    if args.output_format:
        options["format"] = args.output_format
    if args.data_directory:
        options["data_directory"] = args.data_directory
    if args.browser:
        options["use_browser"] = True

    scraper = Scraper(options)
    scraper.extract_item_data(load_callable(args.extractor))
    if args.pagination:
        scraper.find_pagination_links(load_callable(args.pagination))
    if args.items:
        scraper.find_items_links(load_callable(args.items))
    if args.filename:
        scraper.customize_filename(load_callable(args.filename))
    for registration in args.formatter:
        name, sep, path = registration.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid --formatter '{registration}'. Use NAME=module:function.")
        scraper.register_formatter(name.strip(), load_callable(path.strip()))

    summaries = scraper.scrape(urls)
    print(json.dumps([asdict(summary) for summary in summaries], indent=2))
    return 0 if all(summary.status != "failed" for summary in summaries) else 1


if __name__ == "__main__":
    raise SystemExit(main())
