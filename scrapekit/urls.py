"""
URL helpers shared by the crawl engine and the scraper facade.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

_SCHEME_PREFIX = re.compile(r"https?://")
_NON_WORD_RUN = re.compile(r"\W+")


def is_valid_url(url: object) -> bool:
    """
    Return whether `url` is a well-formed absolute http(s) URL.
    """

    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_url(url: str, base_url: str) -> str:
    """
    Return `url` unchanged when absolute, otherwise prefixed with the
    scheme and host of `base_url`.
    """

    if is_valid_url(url):
        return url
    return urljoin(f"{origin_of(base_url)}/", url)


def default_filename(url: str) -> str:
    """
    Build the default output file stem for a seed URL.

    >>> default_filename("https://example.com/shoes?x=1")
    'items_example_com_shoes_x_1'
    """

    stripped = _SCHEME_PREFIX.sub("", url, count=1)
    return f"items_{_NON_WORD_RUN.sub('_', stripped)}"
