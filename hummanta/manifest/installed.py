"""
Installed-state cache: what has been fetched and unpacked locally.

The cache is a four-level mapping kind -> domain -> category -> package ->
:class:`Entry` persisted as ``<root>/installed.toml``::

    [toolchains.solidity.detector.solidity-detector-foundry]
    version = "v1.2.0"
    description = "Detects Foundry based Solidity projects"
    path = "/home/user/.hummanta/toolchains/solidity/solidity-detector-foundry"

The model is pure data; loading, locking and saving live in the package
manager.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from hummanta.manifest.base import ManifestFile, optional_str, require_str


@dataclass
class Entry:
    """Installed version, description and location of a package."""

    version: str
    path: Path
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        if not isinstance(data, dict):
            raise ValueError("entry must be a table")
        return cls(
            version=require_str(data, "version"),
            path=Path(require_str(data, "path")),
            description=optional_str(data, "description"),
        )

    def to_dict(self) -> Dict[str, str]:
        data = {"version": self.version}
        # TOML has no null; an absent description is simply omitted
        if self.description is not None:
            data["description"] = self.description
        data["path"] = str(self.path)
        return data


@dataclass
class PackageEntry:
    """A package name together with its installed entry."""

    name: str
    entry: Entry


PackageMap = Dict[str, Entry]
CategoryMap = Dict[str, PackageMap]
DomainMap = Dict[str, CategoryMap]
KindMap = Dict[str, DomainMap]


def _table(data: Any, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a table")
    return data


class InstalledManifest(ManifestFile):
    """In-memory copy of the installed-state cache."""

    def __init__(self, kinds: Optional[KindMap] = None):
        self._kinds: KindMap = kinds or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstalledManifest":
        kinds: KindMap = {}
        for kind, domains in data.items():
            kinds[kind] = {}
            for domain, categories in _table(domains, kind).items():
                kinds[kind][domain] = {}
                for category, packages in _table(categories, f"{kind}.{domain}").items():
                    name = f"{kind}.{domain}.{category}"
                    kinds[kind][domain][category] = {
                        package: Entry.from_dict(entry)
                        for package, entry in _table(packages, name).items()
                    }
        return cls(kinds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            kind: {
                domain: {
                    category: {name: entry.to_dict() for name, entry in packages.items()}
                    for category, packages in categories.items()
                }
                for domain, categories in domains.items()
            }
            for kind, domains in self._kinds.items()
        }

    def as_map(self) -> KindMap:
        """The underlying nested mapping."""
        return self._kinds

    def insert(self, kind: str, domain: str, category: str, package: str, entry: Entry) -> None:
        """Insert or replace a package entry, creating intermediate levels."""
        (
            self._kinds.setdefault(kind, {})
            .setdefault(domain, {})
            .setdefault(category, {})
        )[package] = entry

    def remove(self, kind: str, domain: str, category: str, package: str) -> Optional[Entry]:
        """Remove a package entry, returning it if it existed."""
        packages = self.get_package(kind, domain, category)
        if packages is None:
            return None
        return packages.pop(package, None)

    def contains(self, kind: str, domain: str, category: str, package: str) -> bool:
        packages = self.get_package(kind, domain, category)
        return packages is not None and package in packages

    def get_domain(self, kind: str) -> Optional[DomainMap]:
        """All domains installed under a kind (e.g. "toolchains")."""
        return self._kinds.get(kind)

    def get_category(self, kind: str, domain: str) -> Optional[CategoryMap]:
        """Category map of one domain (e.g. "toolchains" -> "solidity")."""
        return self._kinds.get(kind, {}).get(domain)

    def get_package(self, kind: str, domain: str, category: str) -> Optional[PackageMap]:
        """Package map of one category (e.g. "toolchains" -> "solidity" -> "detector")."""
        return self._kinds.get(kind, {}).get(domain, {}).get(category)

    def remove_domain(self, kind: str, domain: str) -> Optional[CategoryMap]:
        """Remove every package under a kind and domain."""
        domains = self._kinds.get(kind)
        if domains is None:
            return None
        removed = domains.pop(domain, None)
        if not domains:
            del self._kinds[kind]
        return removed

    def set_domain(self, kind: str, domain: str, categories: Optional[CategoryMap]) -> None:
        """Replace the category map of one domain (dropping the domain when None or empty)."""
        if categories:
            self._kinds.setdefault(kind, {})[domain] = categories
        else:
            self.remove_domain(kind, domain)

    def by_category(self, kind: str, category: str) -> List[PackageMap]:
        """Package maps of a category across every domain of a kind."""
        return [
            categories[category]
            for categories in self._kinds.get(kind, {}).values()
            if category in categories
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InstalledManifest):
            return NotImplemented
        return self._kinds == other._kinds

    def __repr__(self) -> str:
        return f"InstalledManifest({self._kinds!r})"
