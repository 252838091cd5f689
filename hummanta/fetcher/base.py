"""Interface implemented by per-scheme content readers."""

from abc import ABC, abstractmethod
from typing import List


class SchemeFetcher(ABC):
    """
    Reads raw bytes for the URL schemes it supports.

    Implementations do no checksum verification; the dispatching
    :class:`~hummanta.fetcher.fetcher.Fetcher` handles that uniformly.
    """

    @abstractmethod
    def supported_schemes(self) -> List[str]:
        """
        URL schemes handled by this fetcher.

        Returns:
            Scheme names without the separator (e.g. ``["http", "https"]``)
        """
        pass

    @abstractmethod
    def read(self, url: str) -> bytes:
        """
        Read the content at a URL.

        Raises:
            FetchError: If the content can't be read
        """
        pass
