"""
Read-only queries over the installed-state cache.

The functions operate on an ``InstalledManifest`` directly; ``Query`` binds
them to the kind of a package manager, which is how the build pipeline
looks up installed compilers, detectors and targets.
"""

from typing import List, Optional

from hummanta.manifest import CategoryMap, InstalledManifest, PackageEntry, PackageMap


def by_category(installed: InstalledManifest, kind: str, category: str) -> List[PackageMap]:
    """Package maps of every domain that has the category, in domain order."""
    return installed.by_category(kind, category)


def get_category(installed: InstalledManifest, kind: str, domain: str) -> Optional[CategoryMap]:
    """Category map of an installed domain, or None."""
    return installed.get_category(kind, domain)


def get_package(
    installed: InstalledManifest, kind: str, domain: str, category: str
) -> List[PackageEntry]:
    """Installed packages of a domain category, sorted by name (empty when missing)."""
    packages = installed.get_package(kind, domain, category) or {}
    return [PackageEntry(name, packages[name]) for name in sorted(packages)]


class Query:
    """
    Query methods for a package manager.

    Subclasses provide ``installed`` (an ``InstalledManifest``) and ``kind``
    (a ``PackageKind``).
    """

    def by_category(self, category: str) -> List[PackageMap]:
        return by_category(self.installed, self.kind.name, category)

    def get_category(self, domain: str) -> Optional[CategoryMap]:
        return get_category(self.installed, self.kind.name, domain)

    def get_package(self, domain: str, category: str) -> List[PackageEntry]:
        """
        Installed packages of one category in one domain.

        Example:
            >>> manager.get_package("solidity", "compiler")
            [PackageEntry(name='solidity-compiler-solc', entry=Entry(...))]
        """
        return get_package(self.installed, self.kind.name, domain, category)
