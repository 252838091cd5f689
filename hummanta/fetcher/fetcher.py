"""
Scheme-dispatching content fetcher with checksum verification.

Example:
    >>> fetcher = Fetcher.default()
    >>> data = fetcher.fetch(
    ...     FetchContext("https://example.com/tool.tar.gz").with_checksum_url(
    ...         "https://example.com/tool.tar.gz.sha256"
    ...     )
    ... )
"""

import logging
from typing import Dict, List, Optional

from hummanta.core.exceptions import FetchError, InvalidUrl, UnsupportedScheme
from hummanta.fetcher import checksum
from hummanta.fetcher.base import SchemeFetcher
from hummanta.fetcher.context import FetchContext
from hummanta.fetcher.local import LocalFetcher
from hummanta.fetcher.remote import RemoteFetcher

logger = logging.getLogger(__name__)

SCHEME_SEPARATOR = "://"


class Fetcher:
    """
    Retrieves bytes by dispatching on the URL scheme.

    Verification happens here, after the scheme handler returned the
    content: a ``checksum_url`` is fetched through this same fetcher, a
    literal ``checksum`` is used as is, and with neither nothing is checked.
    """

    def __init__(self):
        self._fetchers: Dict[str, SchemeFetcher] = {}

    @classmethod
    def default(cls, timeout: Optional[int] = None) -> "Fetcher":
        """Create a fetcher with the ``file``, ``http`` and ``https`` handlers."""
        fetcher = cls()
        fetcher.register(LocalFetcher())
        if timeout is None:
            fetcher.register(RemoteFetcher())
        else:
            fetcher.register(RemoteFetcher(timeout=timeout))
        return fetcher

    def register(self, handler: SchemeFetcher) -> None:
        """Register a handler for each scheme it supports, replacing any previous one."""
        for scheme in handler.supported_schemes():
            self._fetchers[scheme] = handler
            logger.debug(f"Registered {type(handler).__name__} for '{scheme}'")

    def schemes(self) -> List[str]:
        """Schemes with a registered handler."""
        return sorted(self._fetchers)

    def fetch(self, context: FetchContext) -> bytes:
        """
        Fetch and optionally verify the content described by a context.

        Args:
            context: What to fetch and how to verify it

        Returns:
            The fetched bytes

        Raises:
            InvalidUrl: If the URL has no scheme
            UnsupportedScheme: If no handler is registered for the scheme
            NetworkError: If a remote request fails
            FileError: If a local read fails
            HashMismatch: If verification fails
        """
        data = self._read(context.url)

        expected = self._resolve_checksum(context)
        if expected is not None:
            checksum.verify(data, expected)

        return data

    def _resolve_checksum(self, context: FetchContext) -> Optional[str]:
        if context.checksum_url:
            raw = self._read(context.checksum_url)
            try:
                return raw.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                raise FetchError(
                    f"Checksum at {context.checksum_url} is not UTF-8 text: {e}"
                ) from e
        return context.checksum

    def _read(self, url: str) -> bytes:
        scheme = self.scheme(url)
        handler = self._fetchers.get(scheme)
        if handler is None:
            raise UnsupportedScheme(scheme)
        return handler.read(url)

    @staticmethod
    def scheme(url: str) -> str:
        """
        Extract the scheme of a URL.

        Raises:
            InvalidUrl: If the URL has no ``://`` separator
        """
        scheme, separator, _ = url.partition(SCHEME_SEPARATOR)
        if not separator or not scheme:
            raise InvalidUrl(url)
        return scheme.lower()
