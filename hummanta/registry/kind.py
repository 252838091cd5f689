"""
Package kinds managed by Hummanta.

A kind names the top-level section of the registry index and of the
installed-state cache, and the directory under the installation root.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageKind:
    """A category of installable packages, e.g. ``toolchains``."""

    name: str

    def __str__(self) -> str:
        return self.name


TOOLCHAIN = PackageKind("toolchains")
TARGET = PackageKind("targets")
