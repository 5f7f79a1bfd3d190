"""
Defaults + environment + option merging for scraper configuration.
"""

from __future__ import annotations

import copy
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from scrapekit.config.models import BrowserOptions, ScraperConfig
from scrapekit.errors import ConfigError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_OPTIONS: dict[str, Any] = {
    "format": "json",
    "user_agent": DEFAULT_USER_AGENT,
    "request_interval": 2000,
    "batch_size": 30,
    "batch_interval": 5000,
    "data_directory": "scraped_data",
    "files_directory": "./files",
    "use_browser": False,
    "timeout_seconds": 15.0,
    "browser": {
        "headless": True,
        "args": ["--no-sandbox", "--disable-setuid-sandbox"],
        "wait_for_selector": None,
        "launch_options": {},
    },
}

# camelCase option names accepted alongside snake_case ones.
_OPTION_ALIASES = {
    "userAgent": "user_agent",
    "requestInterval": "request_interval",
    "batchSize": "batch_size",
    "batchInterval": "batch_interval",
    "dataDirectory": "data_directory",
    "filesDirectory": "files_directory",
    "usePuppeteer": "use_browser",
    "useBrowser": "use_browser",
    "timeoutSeconds": "timeout_seconds",
    "puppeteer": "browser",
}
_BROWSER_ALIASES = {
    "waitForSelector": "wait_for_selector",
    "launchOptions": "launch_options",
}


ENV_PREFIX = "SCRAPEKIT_"
ENV_FILES = (".env", ".env.local")


def load_env_files(root: Path | None = None) -> dict[str, str]:
    """
    Copy `SCRAPEKIT_*` settings from `.env` and `.env.local` into the process
    environment and return the ones that were applied.

    Variables already set in the environment win. Lines may carry an
    `export ` prefix and quoted values; other keys are ignored.
    """

    applied: dict[str, str] = {}
    base = root or Path.cwd()
    for env_path in (base / name for name in ENV_FILES):
        if not env_path.is_file():
            continue
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            key, sep, value = line.partition("=")
            key = key.strip()
            if not sep or not key.startswith(ENV_PREFIX) or key in os.environ:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            os.environ[key] = value
            applied[key] = value
    return applied


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge `source` into `target` recursively; nested mappings are merged,
    every other value replaces the target value.
    """

    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            target[key] = deep_merge(current, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def build_config(
    options: Mapping[str, Any] | None = None,
    *,
    use_env: bool = True,
) -> ScraperConfig:
    """
    Build an immutable config from defaults, `SCRAPEKIT_*` environment
    variables and explicit options, in that order of precedence.
    """

    merged = copy.deepcopy(DEFAULT_OPTIONS)
    if use_env:
        load_env_files()
        deep_merge(merged, _env_overrides())
    if options:
        deep_merge(merged, _normalize_keys(options))
    return _to_config(merged)


def _normalize_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name == "browser" and isinstance(value, Mapping):
            value = _normalize_browser_keys(value)
        normalized[name] = value
    return normalized


def _normalize_browser_keys(options: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in options.items():
        name = _BROWSER_ALIASES.get(key, key)
        if name == "options" and isinstance(value, Mapping):
            # Puppeteer-style launch block: {"options": {"headless": ..., "args": [...]}}
            launch = dict(value)
            if "headless" in launch:
                normalized["headless"] = launch.pop("headless")
            if "args" in launch:
                normalized["args"] = launch.pop("args")
            if launch:
                normalized["launch_options"] = launch
            continue
        normalized[name] = value
    return normalized


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    browser: dict[str, Any] = {}

    _set_if_present(overrides, "format", _get_str_env("SCRAPEKIT_FORMAT"))
    _set_if_present(overrides, "user_agent", _get_str_env("SCRAPEKIT_USER_AGENT"))
    _set_if_present(overrides, "request_interval", _get_int_env("SCRAPEKIT_REQUEST_INTERVAL"))
    _set_if_present(overrides, "batch_size", _get_int_env("SCRAPEKIT_BATCH_SIZE"))
    _set_if_present(overrides, "batch_interval", _get_int_env("SCRAPEKIT_BATCH_INTERVAL"))
    _set_if_present(overrides, "data_directory", _get_str_env("SCRAPEKIT_DATA_DIRECTORY"))
    _set_if_present(overrides, "files_directory", _get_str_env("SCRAPEKIT_FILES_DIRECTORY"))
    _set_if_present(overrides, "use_browser", _get_bool_env("SCRAPEKIT_USE_BROWSER"))
    _set_if_present(overrides, "timeout_seconds", _get_float_env("SCRAPEKIT_TIMEOUT_SECONDS"))
    _set_if_present(browser, "headless", _get_bool_env("SCRAPEKIT_BROWSER_HEADLESS"))
    _set_if_present(browser, "wait_for_selector", _get_str_env("SCRAPEKIT_WAIT_FOR_SELECTOR"))

    if browser:
        overrides["browser"] = browser
    return overrides


def _set_if_present(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def _get_bool_env(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _get_float_env(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _get_str_env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped or None


def _to_config(merged: Mapping[str, Any]) -> ScraperConfig:
    browser_raw = merged.get("browser") or {}
    if not isinstance(browser_raw, Mapping):
        raise ConfigError("Invalid scraper config: 'browser' must be a mapping.")

    try:
        config = ScraperConfig(
            format=str(merged["format"]).strip(),
            user_agent=str(merged["user_agent"]),
            request_interval=int(merged["request_interval"]),
            batch_size=int(merged["batch_size"]),
            batch_interval=int(merged["batch_interval"]),
            data_directory=str(merged["data_directory"]),
            files_directory=str(merged["files_directory"]),
            use_browser=bool(merged["use_browser"]),
            timeout_seconds=float(merged["timeout_seconds"]),
            browser=BrowserOptions(
                headless=bool(browser_raw.get("headless", True)),
                args=tuple(str(arg) for arg in browser_raw.get("args") or ()),
                wait_for_selector=browser_raw.get("wait_for_selector") or None,
                launch_options=dict(browser_raw.get("launch_options") or {}),
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid scraper config: {exc}") from exc

    if not config.format:
        raise ConfigError("Invalid scraper config: 'format' must not be empty.")
    if config.batch_size < 1:
        raise ConfigError("Invalid scraper config: 'batch_size' must be at least 1.")
    if config.request_interval < 0 or config.batch_interval < 0:
        raise ConfigError("Invalid scraper config: intervals must not be negative.")
    return config
