"""
Run a seed-file scrape from CLI.

Example:
    python scripts/run_scrape.py seeds.json --extractor myproject.hooks:extract_item \
        --items myproject.hooks:find_items --format csv
"""

from __future__ import annotations

from scrapekit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
