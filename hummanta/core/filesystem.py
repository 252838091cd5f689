"""
File system utilities for Hummanta.

This module provides the file operations the package manager relies on:
- Unpacking in-memory .tar.gz artifacts with directory traversal checks
- Creating single-file .tar.gz artifacts
- Atomic writes for manifests and the installed-state cache
- Safe recursive deletion of installation directories
"""

import io
import os
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional, Union

from hummanta.core.exceptions import HummantaError

IS_WINDOWS = os.name == "nt"


class FilesystemError(HummantaError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether path is located under parent.

    Args:
        path: Path to check
        parent: Potential parent directory

    Returns:
        True if path is parent or is inside parent
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Handling
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _validate_archive_link(member: tarfile.TarInfo, destination: Path) -> None:
    """
    Validate that a symlink or hard link member points inside the destination.

    Symlink targets are relative to the link's directory, hard link targets
    to the archive root.

    Raises:
        InsecureArchiveError: If the link target escapes the destination
    """
    if member.issym():
        base = (destination / member.name).parent
    else:
        base = destination
    target = (base / member.linkname).resolve()

    if os.path.isabs(member.linkname) or not is_relative_to(target, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive link '{member.name}' -> '{member.linkname}' points outside "
            "the destination. This is a security risk and extraction has been blocked."
        )


def unpack_tar_gz(data: bytes, destination: Union[str, Path]) -> None:
    """
    Unpack an in-memory .tar.gz archive into a destination directory.

    Existing files with the same names are overwritten, so re-unpacking the
    same artifact is idempotent.

    Args:
        data: Raw bytes of the gzip-compressed tarball
        destination: Directory to extract to (created if missing)

    Raises:
        InsecureArchiveError: If archive contains malicious paths
        ArchiveExtractionError: If the data is not a valid .tar.gz or
            extraction fails

    Example:
        >>> unpack_tar_gz(Path('tool.tar.gz').read_bytes(), '/tmp/tool')
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            members = tar.getmembers()

            for member in members:
                _validate_archive_path(member.name, destination)
                if member.issym() or member.islnk():
                    _validate_archive_link(member, destination)

            # Extract with filter for security (Python 3.12+, backported to 3.11.4)
            # For older Python, paths and links were validated above
            if hasattr(tarfile, "data_filter"):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to unpack archive: {e}") from e


def archive_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Create a .tar.gz archive containing a single file stored by its name.

    Args:
        source: File to archive
        destination: Path of the archive to create

    Returns:
        Path to the created archive

    Raises:
        FilesystemError: If source is missing or is not a regular file
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Source file does not exist: {source}")
    if not source.is_file():
        raise FilesystemError(f"Source path is not a file: {source}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(destination, "w:gz") as tar:
        tar.add(source, arcname=source.name)

    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Example:
        >>> atomic_write('installed.toml', '[toolchains]\\n')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> bool:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Returns:
        True if the directory existed and was removed, False if it was absent

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/home/user/.hummanta/toolchains/solidity',
        ...             require_prefix='/home/user/.hummanta')
        True
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix) or path == require_prefix:
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return False

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, 0o777)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e

    return True
