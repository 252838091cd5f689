"""
Content fetching for Hummanta.

Retrieves raw bytes from local files and HTTP(S) URLs and verifies them
against SHA-256 checksums.
"""

from .base import SchemeFetcher
from .context import FetchContext
from .fetcher import Fetcher
from .local import LocalFetcher
from .remote import RemoteFetcher
from .checksum import (
    sha256_hex,
    verify,
    file_sha256,
    checksum_path_for,
    read_checksum,
    write_checksum,
    CHECKSUM_FILE_SUFFIX,
)

__all__ = [
    "SchemeFetcher",
    "FetchContext",
    "Fetcher",
    "LocalFetcher",
    "RemoteFetcher",
    "sha256_hex",
    "verify",
    "file_sha256",
    "checksum_path_for",
    "read_checksum",
    "write_checksum",
    "CHECKSUM_FILE_SUFFIX",
]
