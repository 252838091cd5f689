"""Fetcher for local files addressed with ``file://`` URLs."""

import logging
from pathlib import Path
from typing import List

from hummanta.core.exceptions import FileError
from hummanta.fetcher.base import SchemeFetcher

logger = logging.getLogger(__name__)

FILE_PREFIX = "file://"


class LocalFetcher(SchemeFetcher):
    """Reads content from the local filesystem."""

    def supported_schemes(self) -> List[str]:
        return ["file"]

    def read(self, url: str) -> bytes:
        path = Path(url[len(FILE_PREFIX):] if url.startswith(FILE_PREFIX) else url)
        logger.debug(f"Reading {path}")

        try:
            return path.read_bytes()
        except OSError as e:
            raise FileError(f"File operation failed: {e}") from e
