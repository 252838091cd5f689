"""
Directory structure management for Hummanta.

This module resolves the Hummanta home directory, which doubles as the
installation root for every package kind.

Directory Structure:
    Home (~/.hummanta/ or %USERPROFILE%\\.hummanta\\):
        - toolchains/<domain>/  : Unpacked toolchain packages
        - targets/<domain>/     : Unpacked target packages
        - installed.toml        : Installed-state cache
        - installed.toml.lock   : Advisory lock for the cache
        - config.yaml           : User configuration
"""

import os
from pathlib import Path
from typing import Optional

from hummanta.core.exceptions import HummantaError

HOME_ENV_VAR = "HUMMANTA_HOME"
INSTALLED_MANIFEST_NAME = "installed.toml"
CONFIG_FILE_NAME = "config.yaml"


class DirectoryError(HummantaError):
    """Base exception for directory-related errors."""

    pass


def get_home_dir() -> Path:
    """
    Get the Hummanta home directory path.

    The HUMMANTA_HOME environment variable takes precedence over the
    platform default.

    Returns:
        Path: The home directory path.
            - Windows: %USERPROFILE%\\.hummanta
            - Linux/macOS: ~/.hummanta/

    Example:
        >>> get_home_dir()
        PosixPath('/home/user/.hummanta')
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine Hummanta home directory."
            )
        return Path(user_profile) / ".hummanta"
    return Path.home() / ".hummanta"


def ensure_home_dir(home_dir: Optional[Path] = None) -> Path:
    """
    Create the home directory if it does not exist (idempotent).

    Args:
        home_dir: Directory to create. If None, uses get_home_dir().

    Returns:
        The home directory path.

    Raises:
        DirectoryError: If the directory cannot be created
    """
    home_dir = Path(home_dir) if home_dir is not None else get_home_dir()
    try:
        home_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(f"Failed to create Hummanta home directory {home_dir}: {e}") from e
    return home_dir


def installed_manifest_path(root: Path) -> Path:
    """Path of the installed-state cache under an installation root."""
    return Path(root) / INSTALLED_MANIFEST_NAME


def config_file_path(home_dir: Path) -> Path:
    """Path of the user configuration file under the home directory."""
    return Path(home_dir) / CONFIG_FILE_NAME


def domain_dir(root: Path, kind: str, domain: str) -> Path:
    """Install directory for one domain of one kind."""
    return Path(root) / kind / domain
