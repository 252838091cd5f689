"""
Fetcher for remote content over HTTP and HTTPS.

A single GET is issued per read. Retrying is left to callers.
"""

import logging
from typing import List, Optional

import requests
from requests.exceptions import RequestException

from hummanta.core.exceptions import NetworkError
from hummanta.fetcher.base import SchemeFetcher

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class RemoteFetcher(SchemeFetcher):
    """
    Reads content with HTTP GET requests.

    Args:
        session: Optional requests session (a new one is created if None)
        timeout: Request timeout in seconds
    """

    def __init__(
        self, session: Optional[requests.Session] = None, timeout: int = DEFAULT_TIMEOUT
    ):
        self.session = session or requests.Session()
        self.timeout = timeout

    def supported_schemes(self) -> List[str]:
        return ["http", "https"]

    def read(self, url: str) -> bytes:
        logger.debug(f"Downloading from {url}")

        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except RequestException as e:
            raise NetworkError(f"Network request failed: {e}") from e

        return response.content
