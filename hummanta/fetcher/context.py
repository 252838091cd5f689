"""Fetch context describing what to fetch and how to verify it."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class FetchContext:
    """
    A request for the bytes at a URL.

    Attributes:
        url: Location of the content ('file://', 'http://', 'https://' or,
            for registry clients, a registry-relative path)
        checksum: Expected lowercase hex SHA-256 of the content
        checksum_url: Location of a side-car file holding the checksum;
            takes precedence over ``checksum``

    Example:
        >>> FetchContext("index.toml")
        >>> FetchContext("https://example.com/tool.tar.gz").with_checksum_url(
        ...     "https://example.com/tool.tar.gz.sha256"
        ... )
    """

    url: str
    checksum: Optional[str] = None
    checksum_url: Optional[str] = None

    def with_checksum(self, checksum: str) -> "FetchContext":
        """Return a copy that verifies against a literal checksum."""
        return replace(self, checksum=checksum)

    def with_checksum_url(self, checksum_url: str) -> "FetchContext":
        """Return a copy that verifies against a checksum fetched from a URL."""
        return replace(self, checksum_url=checksum_url)

    def with_url(self, url: str) -> "FetchContext":
        """Return a copy pointing at a different URL, keeping checksum fields."""
        return replace(self, url=url)
