"""
SHA-256 checksum helpers.

Checksums are bare lowercase hex SHA-256 digests. Side-car files are named
``<artifact>.sha256`` and contain only the digest.
"""

import hashlib
import logging
from pathlib import Path
from typing import Union

from hummanta.core.exceptions import HashMismatch
from hummanta.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

CHECKSUM_FILE_SUFFIX = "sha256"


def sha256_hex(data: bytes) -> str:
    """Compute the lowercase hex SHA-256 digest of a byte buffer."""
    return hashlib.sha256(data).hexdigest()


def verify(data: bytes, expected: str) -> None:
    """
    Verify a byte buffer against an expected SHA-256 digest.

    The comparison is exact: both sides are expected in lowercase hex.

    Args:
        data: Content to verify
        expected: Expected hex digest

    Raises:
        HashMismatch: If the digest of data differs from expected
    """
    actual = sha256_hex(data)
    if actual != expected:
        raise HashMismatch(expected=expected, actual=actual)
    logger.debug("Checksum verified successfully")


def file_sha256(file_path: Union[str, Path]) -> str:
    """
    Compute the SHA-256 digest of a file, reading it in chunks.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)
    return hasher.hexdigest()


def checksum_path_for(artifact: Union[str, Path]) -> Path:
    """Side-car checksum path for an artifact (``<artifact>.sha256``)."""
    artifact = Path(artifact)
    return artifact.with_name(f"{artifact.name}.{CHECKSUM_FILE_SUFFIX}")


def write_checksum(artifact: Union[str, Path]) -> Path:
    """
    Write the side-car checksum file for an artifact.

    Returns:
        Path to the written ``.sha256`` file
    """
    output = checksum_path_for(artifact)
    atomic_write(output, file_sha256(artifact))
    logger.debug(f"Wrote checksum {output}")
    return output


def read_checksum(path: Union[str, Path]) -> str:
    """
    Read a digest from a ``.sha256`` side-car file.

    Raises:
        ValueError: If the file does not have the .sha256 extension or is empty
        OSError: If the file can't be read
    """
    path = Path(path)
    if path.suffix != f".{CHECKSUM_FILE_SUFFIX}":
        raise ValueError(
            f"Invalid file extension: expected .{CHECKSUM_FILE_SUFFIX}, got {path}"
        )

    content = path.read_text(encoding="utf-8").strip()
    if not content:
        raise ValueError(f"SHA256 file is empty: {path}")
    return content
