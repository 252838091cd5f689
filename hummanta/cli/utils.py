"""
Shared utilities for CLI commands.

Provides manager construction, prompting and output formatting used across
the toolchain and target commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from hummanta.core.config import Config
from hummanta.core.directory import config_file_path, ensure_home_dir
from hummanta.fetcher import Fetcher
from hummanta.manifest import CategoryMap
from hummanta.registry import Manager, PackageKind, RegistryClient

logger = logging.getLogger(__name__)


# ============================================================================
# Context
# ============================================================================


def load_config(home_dir: Path) -> Config:
    """Load the user configuration from the home directory."""
    return Config.load(config_file_path(home_dir))


def create_manager(args, kind: PackageKind, home_dir: Optional[Path] = None) -> Manager:
    """
    Create a package manager from parsed arguments.

    The registry URL is taken from ``--registry``, then HUMMANTA_REGISTRY,
    then the configuration file; the network timeout from ``--timeout``,
    then the configuration file.

    Args:
        args: Parsed arguments (``registry`` and ``timeout`` are optional)
        kind: Kind of packages to manage
        home_dir: Installation root (default: Hummanta home directory)

    Returns:
        Configured Manager instance
    """
    home_dir = ensure_home_dir(home_dir)
    config = load_config(home_dir)
    registry = config.resolve_registry(getattr(args, "registry", None))
    logger.debug(f"Using registry {registry}")

    fetcher = Fetcher.default(timeout=config.resolve_timeout(getattr(args, "timeout", None)))
    return Manager(RegistryClient(registry, fetcher), kind, home_dir)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def confirm(prompt: str) -> bool:
    """Ask a yes/no question; only ``y`` or ``Y`` confirms."""
    print(prompt)
    try:
        response = input().strip()
    except EOFError:
        return False
    return response.lower() == "y"


def print_domain_packages(domain: str, categories: CategoryMap) -> None:
    """
    Print the installed packages of a domain.

    Example output::

        solidity
          solidity-detector-foundry v1.2.0
          Detects Foundry based Solidity projects
    """
    safe_print(domain)
    for packages in categories.values():
        for name, entry in packages.items():
            safe_print(f"  {name} {entry.version}")
            if entry.description:
                safe_print(f"  {entry.description}")


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message, falling back to ASCII when the console can't encode it.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        print(message.encode("ascii", errors="replace").decode("ascii"), file=file)
