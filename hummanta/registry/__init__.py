"""
Registry access and package management for Hummanta.

Resolves domains through the registry, installs their packages under an
installation root and answers queries about what is installed.
"""

from .kind import PackageKind, TOOLCHAIN, TARGET
from .client import RegistryClient
from .query import Query, by_category, get_category, get_package
from .manager import (
    AddReport,
    InstalledPackage,
    Manager,
    SkippedPackage,
    TargetManager,
    ToolchainManager,
)

__all__ = [
    "PackageKind",
    "TOOLCHAIN",
    "TARGET",
    "RegistryClient",
    "Query",
    "by_category",
    "get_category",
    "get_package",
    "AddReport",
    "InstalledPackage",
    "Manager",
    "SkippedPackage",
    "TargetManager",
    "ToolchainManager",
]
