"""
File download helper handed to item extractors.
"""

from __future__ import annotations

import logging
import os
import posixpath
from mimetypes import guess_extension
from pathlib import Path
from urllib.parse import urlparse

import requests

from scrapekit.config.models import ScraperConfig
from scrapekit.errors import DownloadError
from scrapekit.logging_utils import log_event

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def filename_from_url(url: str) -> str:
    return posixpath.basename(urlparse(url).path)


class FileDownloader:
    """
    Streams remote files into the configured files directory.
    """

    def __init__(
        self,
        *,
        config: ScraperConfig,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._headers = {"User-Agent": config.user_agent}

    def __call__(self, url: str | None, filename: str | None = None) -> str | None:
        return self.download(url, filename)

    def download(self, url: str | None, filename: str | None = None) -> str | None:
        """
        Download `url` and return the saved path relative to the data directory.

        The filename is inferred from the URL path when omitted; a missing
        extension is guessed from the response content type.
        """

        if not url:
            return None

        name = Path(filename or filename_from_url(str(url))).name
        if not name:
            raise DownloadError(f"Cannot infer a filename for {url}")

        try:
            response = self._session.get(
                url,
                headers=self._headers,
                timeout=self._config.timeout_seconds,
                stream=True,
            )
        except requests.RequestException as exc:
            log_event(logger, logging.ERROR, "file_download_failed", url=url, error=str(exc))
            raise DownloadError(f"Failed to download {url}: {exc}") from exc

        with response:
            if not 200 <= response.status_code < 300:
                log_event(
                    logger,
                    logging.ERROR,
                    "file_download_failed",
                    url=url,
                    status_code=response.status_code,
                )
                raise DownloadError(
                    f"Failed to download {url}, status code: {response.status_code}"
                )

            if not Path(name).suffix:
                name += self._extension_for(response.headers.get("Content-Type"))

            files_dir = self._config.files_path
            files_dir.mkdir(parents=True, exist_ok=True)
            file_path = files_dir / name
            try:
                with file_path.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            handle.write(chunk)
            except (requests.RequestException, OSError) as exc:
                file_path.unlink(missing_ok=True)
                log_event(logger, logging.ERROR, "file_download_failed", url=url, error=str(exc))
                raise DownloadError(f"Failed to download {url}: {exc}") from exc

        relative_path = Path(os.path.relpath(file_path, self._config.data_path)).as_posix()
        log_event(logger, logging.INFO, "file_downloaded", url=url, path=relative_path)
        return relative_path

    @staticmethod
    def _extension_for(content_type: str | None) -> str:
        if not content_type:
            return ""
        mime_type = content_type.split(";", 1)[0].strip().lower()
        return guess_extension(mime_type) or ""
