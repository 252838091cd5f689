"""
Registry client: resolves registry-relative paths and fetches through a Fetcher.
"""

import dataclasses
import logging
from typing import Optional

from hummanta.fetcher import Fetcher, FetchContext
from hummanta.manifest import IndexManifest

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "index.toml"


class RegistryClient:
    """
    Client bound to one registry base URL.

    Paths found in registry documents may be absolute URLs or relative to
    the registry root; relative ones are joined to the base URL before
    fetching.

    Example:
        >>> client = RegistryClient("https://hummanta.github.io/registry")
        >>> index = client.index()
        >>> index.get("toolchains", "solidity")
        'toolchains/solidity.toml'
    """

    def __init__(self, base_url: str, fetcher: Optional[Fetcher] = None):
        """
        Initialize registry client.

        Args:
            base_url: Registry root URL (a trailing ``/`` is dropped)
            fetcher: Fetcher to use (default: ``Fetcher.default()``)
        """
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher if fetcher is not None else Fetcher.default()

    def resolve(self, url: str) -> str:
        """Absolute URL for a possibly registry-relative path."""
        if "://" in url:
            return url
        return f"{self.base_url}/{url}"

    def rewrite(self, context: FetchContext) -> FetchContext:
        """
        Rewrite a context so its URLs are absolute.

        The literal checksum is carried over unchanged; a relative
        ``checksum_url`` is resolved like the URL itself.
        """
        checksum_url = context.checksum_url
        if checksum_url is not None:
            checksum_url = self.resolve(checksum_url)
        return dataclasses.replace(
            context, url=self.resolve(context.url), checksum_url=checksum_url
        )

    def fetch(self, context: FetchContext) -> bytes:
        """Fetch a registry resource, resolving relative URLs first."""
        context = self.rewrite(context)
        logger.debug(f"Fetching {context.url}")
        return self.fetcher.fetch(context)

    def index(self) -> IndexManifest:
        """
        Fetch and parse the registry root index.

        Raises:
            FetchError: If the index can't be retrieved
            ManifestError: If the index is not a valid manifest
        """
        return IndexManifest.from_bytes(self.fetch(FetchContext(INDEX_FILE_NAME)))
